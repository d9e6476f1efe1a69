# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask
from flask_cors import CORS

from authservice.container import Container
from authservice.infrastructure.db import init_db
from authservice.infrastructure.tracing import init_tracing, instrument_app
from authservice.shared.logging import logger, setup_logging
from authservice.shared.middleware.error_handler import configure_error_handling
from authservice.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    config = container.config

    setup_logging(config.log_level, log_file=config.log_file, debug=config.debug_logging)

    # Without its store the service is useless; StartupError aborts here.
    init_db(container.engine)

    shutdown_tracing = init_tracing(config.observability)
    if shutdown_tracing is not None:
        atexit.register(shutdown_tracing)

    app = Flask(__name__)
    app.extensions["container"] = container

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(
        app,
        debug_mode=config.debug_logging,
        metrics_enabled=config.observability.metrics_enabled,
    )
    if shutdown_tracing is not None:
        instrument_app(app, container.engine)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

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

    logger.info("Flask app initialized")
    return app


def main() -> None:
    container = Container()
    app = create_app(container)
    app.run(host=container.config.host, port=container.config.port)


if __name__ == "__main__":
    main()
