"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from tokenauth.core.config import CONFIG_MAP, BaseConfig, get_config
from tokenauth.core.logger import configure_logging
from tokenauth.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    if isinstance(config, str) and config.strip().lower() in CONFIG_MAP:
        config = get_config(config)
    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from tokenauth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from tokenauth.core import cors

    cors.init_app(app)

    from tokenauth.api import init_app as init_api

    init_api(app)

    from tokenauth.core import errors

    errors.init_app(app)

    from tokenauth import cli as app_cli

    app_cli.init_app(app)

    return app
