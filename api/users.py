from __future__ import annotations

from flask import Blueprint, request, g

from api.responses import api_response
from models.schemas.user import UserOutSchema, UserUpdateSchema
from utils.decorators import get_session_manager, jwt_required
from utils.exceptions import ValidationError

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()
user_update_schema = UserUpdateSchema()


@bp.get("/users/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return api_response(user_out_schema.dump(g.current_user), "Current user fetched")


@bp.patch("/users/me")
@jwt_required()
def update_me():
    """
    Update account details (full name, email, avatar and cover image URLs).
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             fullName: { type: string }
             email: { type: string }
             avatar: { type: string }
             coverImage: { type: string }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      409: { description: Email already in use }
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)
    if not data:
        raise ValidationError("fullName, email, avatar or coverImage is required")

    user = get_session_manager().store.update_profile(g.current_user.id, **data)
    return api_response(user_out_schema.dump(user), "Account details updated")
