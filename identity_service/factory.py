"""Flask application factory for the identity service."""

from __future__ import annotations

from flask import Flask

from identity_service import api, cli, infra
from identity_service.core import errors, extensions, logger
from identity_service.core.config import BaseConfig, get_config


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build the application.

    :param config: Object or import path passed to ``config.from_object``;
        defaults to the class selected by ``APP_ENV``.
    :raises ConfigurationError: If the token policy or signer key is unusable,
        so a misconfigured process never starts serving.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    logger.configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    extensions.init_app(app)
    logger.init_app(app)

    # Needs the database and Redis clients bound above.
    infra.init_app(app)

    api.init_app(app)
    errors.init_app(app)
    cli.init_app(app)
    return app
