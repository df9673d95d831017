# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit
import importlib
from typing import Any, Protocol, cast

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from portal.container import Container
from portal.shared.errors import register_error_handler
from portal.shared.logging import logger, setup_logging
from portal.shared.middleware.rate_limit import configure_rate_limit
from portal.shared.middleware.request_logger import configure_request_logging
from portal.shared.middleware.security_headers import configure_security_headers


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    config = container.config
    setup_logging(config.log_level, config.log_file)

    app = Flask(__name__)
    app.json.sort_keys = False
    hops = config.server.trusted_proxy_hops
    if hops:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops)  # type: ignore[method-assign]

    register_error_handler(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    if config.security.enable_rate_limit:
        configure_rate_limit(app, container.rate_limiter)
    configure_security_headers(app, enable_hsts=config.security.enable_hsts)

    cors_kwargs: dict[str, object] = {
        "origins": config.security.allowed_origins,
        "methods": ["GET", "POST", "PUT", "DELETE"],
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.misc_controller.as_blueprint())

    logger.info("Flask app initialized")
    return app


def main() -> None:
    container = Container()
    atexit.register(container.close)
    app = create_app(container)
    server = container.config.server
    ssl_context = server.ssl_context()
    if ssl_context is None:
        if container.config.is_production():
            logger.error("TLS certificate/key not found, refusing to serve plain HTTP")
            raise SystemExit(1)
        logger.warning("TLS certificate/key not found, serving plain HTTP")
    else:
        logger.info(f"Secure HTTPS server running on https://{server.host}:{server.port}")
    app.run(host=server.host, port=server.port, ssl_context=ssl_context)


if __name__ == "__main__":
    main()
