"""WealthWise application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths; each module exposes ``bp``."""

    yield "wealthwise.blueprints.health"
    yield "wealthwise.blueprints.auth"
    yield "wealthwise.blueprints.users"
    yield "wealthwise.blueprints.accounts"
    yield "wealthwise.blueprints.transactions"
    yield "wealthwise.blueprints.budgets"
    yield "wealthwise.blueprints.goals"
    yield "wealthwise.blueprints.bills"
    yield "wealthwise.blueprints.investments"
    yield "wealthwise.blueprints.notifications"
    yield "wealthwise.blueprints.dashboard"
    yield "wealthwise.blueprints.export"
    yield "wealthwise.blueprints.conversations"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    app.url_map.strict_slashes = False
    config_cls = _resolve_config(config_name)
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["WEALTHWISE_CONFIG"] = config_obj
    app.config["MAX_CONTENT_LENGTH"] = config_obj.IMPORT_MAX_BYTES

    from .errors import register_error_handlers
    from .extensions import init_db
    from .logging_config import init_request_logging, setup_logging
    from .sockets import init_socketio

    setup_logging(config_obj)
    ctx = init_db(app)
    register_error_handlers(app)
    init_request_logging(app)
    _register_blueprints(app)
    init_socketio(app)
    _cli.init_app(app)

    if config_obj.SCHEDULER_ENABLED and not config_obj.TESTING:
        from .scheduler import JobScheduler

        scheduler = JobScheduler(ctx)
        scheduler.start()
        app.extensions["wealthwise_scheduler"] = scheduler

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
