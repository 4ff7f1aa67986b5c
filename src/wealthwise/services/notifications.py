"""Creating notifications and relaying them to connected clients."""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..domain.repositories import NotificationRepository
from ..logging_config import get_logger
from ..models.notification import Notification
from .serializers import notification_to_dict

logger = get_logger("services.notifications")

Emitter = Callable[[int, str, Any], None]

NEW_EVENT = "notification:new"
READ_EVENT = "notification:read"
READ_ALL_EVENT = "notification:readAll"


def resolve_emitter(emit: Optional[Emitter] = None) -> Emitter:
    """Return ``emit`` or the Socket.IO relay when none is given."""
    if emit is not None:
        return emit
    from ..sockets import emit_to_user

    return emit_to_user


def notify(
    *,
    repository: NotificationRepository,
    user_id: int,
    type: str,
    title: str,
    message: str,
    priority: str = "medium",
    data: Optional[dict[str, Any]] = None,
    action_url: Optional[str] = None,
    emit: Optional[Emitter] = None,
) -> Notification:
    """Persist a notification and push ``notification:new`` to the user's room."""

    notification = repository.create(
        Notification(
            user_id=user_id,
            type=type,
            title=title[:100],
            message=message[:500],
            priority=priority,
            data=data or {},
            action_url=action_url,
        ),
        user_id=user_id,
    )
    resolve_emitter(emit)(user_id, NEW_EVENT, notification_to_dict(notification))
    logger.info(
        "Notification created",
        extra={"user_id": user_id, "notification_type": type, "notification_id": notification.id},
    )
    return notification


def mark_read(
    *,
    repository: NotificationRepository,
    notification_id: int,
    user_id: int,
    emit: Optional[Emitter] = None,
) -> Optional[Notification]:
    notification = repository.mark_read(notification_id, user_id=user_id)
    if notification is not None:
        resolve_emitter(emit)(user_id, READ_EVENT, {"id": notification.id})
    return notification


def mark_all_read(
    *, repository: NotificationRepository, user_id: int, emit: Optional[Emitter] = None
) -> int:
    count = repository.mark_all_read(user_id=user_id)
    resolve_emitter(emit)(user_id, READ_ALL_EVENT, {"count": count})
    return count
