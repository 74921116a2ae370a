import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)
from models.user_store import UserStore
from utils.security import TokenSettings
from utils.session_manager import SessionManager

__version__ = "1.0.0"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "VideoTube API",
        "version": __version__,
        "description": "Accounts and sessions for the VideoTube video-sharing backend.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_session_manager(config) -> SessionManager:
    """Build the SessionManager from app config; raises ValueError on bad signing keys."""
    settings = TokenSettings(
        access_secret=config["ACCESS_TOKEN_SECRET"],
        access_ttl=config["ACCESS_TOKEN_EXPIRES"],
        refresh_secret=config["REFRESH_TOKEN_SECRET"],
        refresh_ttl=config["REFRESH_TOKEN_EXPIRES"],
        algorithm=config["JWT_ALGORITHM"],
        issuer=config["JWT_ISSUER"],
    )
    return SessionManager(
        UserStore(storage),
        settings,
        uniform_login_errors=config.get("UNIFORM_LOGIN_ERRORS", False),
    )


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    overrides are applied on top of the selected config class (used by tests).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Token cookies need credentialed CORS requests
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    storage.reload(app.config["DATABASE_URL"])
    app.extensions["session_manager"] = create_session_manager(app.config)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp, url_prefix="/api/v1")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to VideoTube API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
