from marshmallow import Schema, fields, pre_load, validates, validate, ValidationError

MIN_PASSWORD_LENGTH = 8


def _norm(v):
    return v.strip().lower() if isinstance(v, str) else v


def _check_password(value):
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")


class UserCreateSchema(Schema):
    username = fields.String(required=True, validate=validate.Length(min=1, max=64))
    email = fields.Email(required=True)
    full_name = fields.String(required=True, data_key="fullName", validate=validate.Length(min=1, max=255))
    password = fields.String(required=True, load_only=True)
    # Media is uploaded elsewhere; only the hosted URLs arrive here
    avatar = fields.Url(allow_none=True)
    cover_image = fields.Url(allow_none=True, data_key="coverImage")

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            for key in ("email", "username"):
                if key in data:
                    data[key] = _norm(data[key])
            if isinstance(data.get("fullName"), str):
                data["fullName"] = data["fullName"].strip()
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        _check_password(value)


class UserLoginSchema(Schema):
    # Presence is checked by the session layer, which answers 400 itself
    username = fields.String(allow_none=True)
    email = fields.String(allow_none=True)
    password = fields.String(allow_none=True, load_only=True)


class PasswordChangeSchema(Schema):
    old_password = fields.String(allow_none=True, data_key="oldPassword", load_only=True)
    new_password = fields.String(allow_none=True, data_key="newPassword", load_only=True)

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        if value:
            _check_password(value)


class UserUpdateSchema(Schema):
    full_name = fields.String(data_key="fullName", validate=validate.Length(min=1, max=255))
    email = fields.Email()
    # Hosted URLs; the upload itself happens elsewhere
    avatar = fields.Url(allow_none=True)
    cover_image = fields.Url(allow_none=True, data_key="coverImage")

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm(data["email"])
        return data


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True, data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt")
