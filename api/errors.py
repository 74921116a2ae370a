from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
import logging

from utils.exceptions import ApiError

logger = logging.getLogger(__name__)


def error_response(message: str, status: int, errors=None):
    payload = {"statusCode": status, "message": message, "success": False}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status


def register_error_handlers(app):
    # Typed failures from the session layer and the request gate
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            logger.error("%s: %s", err.error, err.message)
        return error_response(err.message, err.status_code, errors=err.errors)

    # Marshmallow validation errors are client-fixable input problems
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        # err.messages contains field-level details
        return error_response("Invalid input", 400, errors=err.messages)

    # Integrity errors (unique constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        if current_app and current_app.debug:
            logger.exception("Integrity error", exc_info=err)
        if "unique constraint" in lower_msg or "unique violation" in lower_msg or "duplicate key" in lower_msg:
            return error_response("Unique constraint violated.", 409)
        return error_response("Integrity error.", 400)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        # Opt-in only; DEBUG alone never puts internals in the response
        if current_app and current_app.config.get("EXPOSE_ERROR_DETAILS", False):
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("An unexpected error occurred", 500, errors=details)
