# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from usermgmt.infrastructure.container import Container
from usermgmt.infrastructure.observability import configure_metrics
from usermgmt.shared.config import AppConfig, load_config
from usermgmt.shared.logging import logger, setup_logging
from usermgmt.shared.middleware.error_handler import configure_error_handling
from usermgmt.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    config = config or (container.config if container else load_config())
    container = container or Container(config)

    setup_logging(config.log_level, log_file=config.log_file)

    app = Flask(__name__)
    app.json.sort_keys = False
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    if config.observability.metrics_enabled:
        configure_metrics(app)

    CORS(app, resources={r"/*": {"origins": config.security.allowed_origins}})
    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.profile_controller.as_blueprint())
    app.extensions["usermgmt.container"] = container

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    if not config.jwt.revoke_on_logout:
        logger.info("tokens remain valid after logout until they expire (JWT_REVOKE_ON_LOGOUT=0)")
    logger.info(f"{config.observability.service_name} app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8080, threaded=True)
