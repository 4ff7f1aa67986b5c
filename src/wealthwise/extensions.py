"""Extension objects and per-app storage wiring for WealthWise."""

from __future__ import annotations

from flask import Flask, current_app
from flask_socketio import SocketIO

from .config import BaseConfig
from .context import AppContext, create_app_context

socketio = SocketIO()

_EXTENSION_KEY = "wealthwise"


def init_db(app: Flask) -> AppContext:
    """Bootstrap the database for ``app`` and attach the repository context."""

    config: BaseConfig = app.config["WEALTHWISE_CONFIG"]
    ctx = create_app_context(config)
    app.extensions[_EXTENSION_KEY] = ctx
    return ctx


def get_context() -> AppContext:
    """Return the context attached to the current app."""

    try:
        return current_app.extensions[_EXTENSION_KEY]
    except KeyError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("Database not initialized for this app") from exc
