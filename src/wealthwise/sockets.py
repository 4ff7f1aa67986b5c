"""Socket.IO relay: authenticated connections join a per-user room."""

from __future__ import annotations

from typing import Any, Optional

from flask import Flask
from flask_socketio import join_room

from .errors import ApiError
from .extensions import get_context, socketio
from .logging_config import get_logger
from .services import auth

logger = get_logger("sockets")


def user_room(user_id: int) -> str:
    return f"user:{user_id}"


def init_socketio(app: Flask) -> None:
    config = app.config["WEALTHWISE_CONFIG"]
    socketio.init_app(
        app,
        cors_allowed_origins=config.CORS_ORIGIN,
        async_mode="threading",
        logger=False,
        engineio_logger=False,
    )


@socketio.on("connect")
def handle_connect(auth_payload: Optional[dict[str, Any]] = None):
    """Reject connections without a valid access token."""

    token = (auth_payload or {}).get("token")
    ctx = get_context()
    try:
        user = auth.authenticate_access_token(token, users=ctx.user_repo, config=ctx.config)
    except ApiError as exc:
        logger.info("Socket connection rejected", extra={"reason": exc.message})
        raise ConnectionRefusedError("Authentication error") from exc
    join_room(user_room(user.id))
    logger.info("Socket connected", extra={"user_id": user.id})


def emit_to_user(user_id: int, event: str, data: Any) -> None:
    """Emit ``event`` to every connection of ``user_id``; no-op before init."""

    if socketio.server is None:
        return
    socketio.emit(event, data, to=user_room(user_id))
