import os
from flask import Flask, abort, current_app, send_from_directory
from flask_swagger_ui import get_swaggerui_blueprint
from .config import config_by_name
from .extensions import db, migrate, jwt
from .errors import register_error_handlers

OPENAPI_FILENAME = "constitution_openapi.yaml"
OPENAPI_URL = "/openapi/constitution.yaml"
SWAGGER_URL = "/swagger"


def _register_api_docs(app: Flask) -> None:
    """Public OpenAPI document plus a Swagger UI pointed at it."""

    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_constitution")
    def serve_openapi():
        spec_dir = os.path.join(current_app.root_path, "api", "v1")

        if not os.path.exists(os.path.join(spec_dir, OPENAPI_FILENAME)):
            current_app.logger.error("%s missing from %s", OPENAPI_FILENAME, spec_dir)
            abort(404, description=f"{OPENAPI_FILENAME} not found")

        return send_from_directory(spec_dir, OPENAPI_FILENAME, mimetype="application/yaml")

    app.register_blueprint(
        get_swaggerui_blueprint(
            SWAGGER_URL,
            OPENAPI_URL,
            config={
                "app_name": "Constitution Builder API",
                "deepLinking": True,
                "persistAuthorization": True,
            },
        ),
        url_prefix=SWAGGER_URL,
    )


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Mappers (and the change feed's flush listener) must exist before any route runs
    from .models import audit_log, constitution, section, user  # noqa: F401
    from .api.v1 import v1_bp

    # -------------------------------------------------
    # API (constitution scoping lives on the nested blueprint)
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    _register_api_docs(app)

    app.logger.info("Constitution API ready (%s config)", config_name)
    return app
