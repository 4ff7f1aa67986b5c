"""Bearer-token guard for API views."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import g, request

from .extensions import get_context
from .models.user import User
from .services import auth

F = TypeVar("F", bound=Callable)


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header.split(" ", 1)[1].strip() or None
    return None


def login_required(view: F) -> F:
    """Resolve the bearer token to a user and expose it as ``g.current_user``."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        ctx = get_context()
        g.current_user = auth.authenticate_access_token(
            bearer_token(), users=ctx.user_repo, config=ctx.config
        )
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


def current_user() -> User:
    return g.current_user
