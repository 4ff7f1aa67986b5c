"""Notification inbox routes."""

from __future__ import annotations

from flask import request

from ...errors import ApiError
from ...extensions import get_context
from ...responses import created, success
from ...security import current_user, login_required
from ...services import notifications as notification_service
from ...services.ledger_service import DEFAULT_PAGE_SIZE, Pagination
from ...services.serializers import notification_to_dict
from ..forms import query_flag, query_int
from . import bp
from .forms import NotificationForm


@bp.get("/")
@login_required
def list_notifications():
    args = request.args
    repo = get_context().notification_repo
    user_id = current_user().id
    pagination = Pagination(
        page=query_int(args, "page", 1), limit=query_int(args, "limit", DEFAULT_PAGE_SIZE)
    )
    rows, total = repo.list_page(
        user_id=user_id,
        offset=pagination.offset,
        limit=pagination.limit,
        unread_only=bool(query_flag(args, "unreadOnly")),
    )
    return success(
        {
            "notifications": [notification_to_dict(n) for n in rows],
            "pagination": pagination.meta(total),
            "unreadCount": repo.count_unread(user_id=user_id),
        },
        "Notifications retrieved successfully",
    )


@bp.get("/unread-count")
@login_required
def unread_count():
    count = get_context().notification_repo.count_unread(user_id=current_user().id)
    return success({"count": count}, "Unread count retrieved successfully")


@bp.put("/read-all")
@login_required
def read_all():
    count = notification_service.mark_all_read(
        repository=get_context().notification_repo, user_id=current_user().id
    )
    return success({"count": count}, "All notifications marked as read")


@bp.delete("/clear-read")
@login_required
def clear_read():
    count = get_context().notification_repo.clear_read(user_id=current_user().id)
    return success({"count": count}, "Read notifications cleared")


@bp.put("/<int:notification_id>/read")
@login_required
def read_one(notification_id: int):
    notification = notification_service.mark_read(
        repository=get_context().notification_repo,
        notification_id=notification_id,
        user_id=current_user().id,
    )
    if notification is None:
        raise ApiError.not_found("Notification not found")
    return success(notification_to_dict(notification), "Notification marked as read")


@bp.delete("/<int:notification_id>")
@login_required
def delete_notification(notification_id: int):
    if not get_context().notification_repo.delete(notification_id, user_id=current_user().id):
        raise ApiError.not_found("Notification not found")
    return success(None, "Notification deleted successfully")


@bp.post("/")
@login_required
def create_notification():
    data = NotificationForm.from_mapping(request.get_json(silent=True)).validated()
    notification = notification_service.notify(
        repository=get_context().notification_repo,
        user_id=current_user().id,
        type=data.get("type", "system"),
        title=data["title"],
        message=data["message"],
        priority=data.get("priority", "medium"),
        data=data.get("data"),
        action_url=data.get("action_url"),
    )
    return created(notification_to_dict(notification), "Notification created successfully")
