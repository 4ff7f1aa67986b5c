"""Authentication routes: register, login, token refresh and logout."""

from __future__ import annotations

from flask import request

from ...extensions import get_context
from ...responses import created, success
from ...security import current_user, login_required
from ...services import auth as auth_service
from ...services.serializers import user_to_dict
from . import bp
from .forms import LoginForm, RegisterForm

REFRESH_COOKIE = "refreshToken"


def set_refresh_cookie(response, token: str) -> None:
    config = get_context().config
    response.set_cookie(
        REFRESH_COOKIE,
        token,
        httponly=True,
        secure=not config.DEV_MODE,
        samesite="Strict",
        max_age=config.JWT_REFRESH_DAYS * 24 * 60 * 60,
    )


def clear_refresh_cookie(response) -> None:
    response.set_cookie(REFRESH_COOKIE, "", httponly=True, samesite="Strict", expires=0)


def _presented_refresh_token() -> str | None:
    body = request.get_json(silent=True) or {}
    return request.cookies.get(REFRESH_COOKIE) or body.get("refreshToken")


@bp.post("/register")
def register():
    data = RegisterForm.from_mapping(request.get_json(silent=True)).validated()
    ctx = get_context()
    user, tokens = auth_service.register(
        email=data["email"],
        password=data["password"],
        profile=data["profile"],
        users=ctx.user_repo,
        config=ctx.config,
    )
    response, status = created(
        {"user": user_to_dict(user), **tokens.as_dict()}, "Registration successful"
    )
    set_refresh_cookie(response, tokens.refresh_token)
    return response, status


@bp.post("/login")
def login():
    data = LoginForm.from_mapping(request.get_json(silent=True)).validated()
    ctx = get_context()
    user, tokens = auth_service.login(
        email=data["email"], password=data["password"], users=ctx.user_repo, config=ctx.config
    )
    response, status = success(
        {"user": user_to_dict(user), **tokens.as_dict()}, "Login successful"
    )
    set_refresh_cookie(response, tokens.refresh_token)
    return response, status


@bp.post("/refresh")
def refresh():
    ctx = get_context()
    access_token = auth_service.refresh_access_token(
        _presented_refresh_token(), users=ctx.user_repo, config=ctx.config
    )
    return success({"accessToken": access_token}, "Token refreshed")


@bp.get("/me")
@login_required
def me():
    return success(user_to_dict(current_user()), "User retrieved successfully")


@bp.post("/logout")
@login_required
def logout():
    auth_service.logout(
        _presented_refresh_token(), user=current_user(), users=get_context().user_repo
    )
    response, status = success(None, "Logged out successfully")
    clear_refresh_cookie(response)
    return response, status


@bp.post("/logout-all")
@login_required
def logout_all():
    auth_service.logout_all(user=current_user(), users=get_context().user_repo)
    response, status = success(None, "Logged out from all devices")
    clear_refresh_cookie(response)
    return response, status
