# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from sessiongate.container import Container
from sessiongate.shared.config import AppConfig, load_config
from sessiongate.shared.logging import logger, setup_logging
from sessiongate.shared.middleware.error_handler import configure_error_handling
from sessiongate.shared.middleware.rate_limit import configure_rate_limiting
from sessiongate.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, container: Container | None = None) -> Flask:
    if container is None:
        container = Container(config or load_config())
    config = container.config

    setup_logging(config.log_level, debug_mode=config.debug_logging, log_file=config.log_file)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    if config.security.trusted_proxies:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=config.security.trusted_proxies)  # type: ignore[method-assign]

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_rate_limiting(app, container.rate_limiter)

    cors_kwargs: dict[str, object] = {"origins": config.security.allowed_origins}
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.protected_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")
        return resp

    logger.info(
        f"Flask app initialized store={config.user_store} "
        f"token_ttl={config.token.ttl_seconds}s alg={config.token.algorithm}"
    )
    return app
