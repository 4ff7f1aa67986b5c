"""Profile and account-management routes."""

from __future__ import annotations

from flask import request

from ...extensions import get_context
from ...responses import success
from ...security import current_user, login_required
from ...services import auth as auth_service
from ...services.serializers import user_to_dict
from ..auth.routes import clear_refresh_cookie, set_refresh_cookie
from . import bp
from .forms import ChangePasswordForm, PreferencesForm, ProfileUpdateForm


@bp.get("/profile")
@login_required
def get_profile():
    return success(user_to_dict(current_user()), "Profile retrieved successfully")


@bp.put("/profile")
@login_required
def update_profile():
    changes = ProfileUpdateForm.from_mapping(request.get_json(silent=True), partial=True).validated()
    user = auth_service.update_profile(
        user=current_user(), changes=changes, users=get_context().user_repo
    )
    return success(user_to_dict(user), "Profile updated successfully")


@bp.put("/preferences")
@login_required
def update_preferences():
    payload = request.get_json(silent=True) or {}
    nested = payload.get("preferences")
    changes = PreferencesForm.from_mapping(
        nested if isinstance(nested, dict) else payload, partial=True
    ).validated()
    user = auth_service.update_preferences(
        user=current_user(), changes=changes, users=get_context().user_repo
    )
    return success(user_to_dict(user), "Preferences updated successfully")


@bp.put("/change-password")
@login_required
def change_password():
    data = ChangePasswordForm.from_mapping(request.get_json(silent=True)).validated()
    ctx = get_context()
    tokens = auth_service.change_password(
        user=current_user(),
        current_password=data["currentPassword"],
        new_password=data["newPassword"],
        users=ctx.user_repo,
        config=ctx.config,
    )
    response, status = success(tokens.as_dict(), "Password changed successfully")
    set_refresh_cookie(response, tokens.refresh_token)
    return response, status


@bp.delete("/account")
@login_required
def delete_account():
    payload = request.get_json(silent=True) or {}
    auth_service.delete_account(
        user=current_user(), password=payload.get("password"), users=get_context().user_repo
    )
    response, status = success(None, "Account deleted successfully")
    clear_refresh_cookie(response)
    return response, status
