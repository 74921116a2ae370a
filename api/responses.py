from flask import jsonify


def api_response(data=None, message: str = "Success", status: int = 200):
    """Success envelope, the counterpart of api.errors.error_response."""
    return jsonify(
        {
            "statusCode": status,
            "data": data,
            "message": message,
            "success": status < 400,
        }
    ), status
