"""Notification inbox cache fed by REST calls and Socket.IO events.

Socket callbacks only enqueue; a single dispatcher thread applies events to
the store, so state changes happen in arrival order. Applying an event is
idempotent per notification id, which matters because our own REST calls
and the server's echo of them both reach :meth:`NotificationStore.apply_event`.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Optional

import socketio

from ..logging_config import get_logger
from .api import ApiClient, ApiRequestError
from .stores import StoreResult

logger = get_logger("client.notifications")

NEW_EVENT = "notification:new"
READ_EVENT = "notification:read"
READ_ALL_EVENT = "notification:readAll"
DOMAIN_EVENTS = (
    "transaction:created",
    "transaction:updated",
    "transaction:deleted",
    "budget:created",
    "budget:updated",
    "budget:deleted",
    "goal:created",
    "goal:updated",
    "goal:deleted",
    "goal:contribution",
    "bill:created",
    "bill:updated",
    "bill:paid",
    "bill:deleted",
    "investment:created",
    "investment:updated",
    "investment:deleted",
)


class NotificationStore:
    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self._lock = threading.Lock()
        self.notifications: list[dict[str, Any]] = []
        self.unread_count = 0
        self.connected = False
        self.error: Optional[str] = None
        self.domain_events: list[tuple[str, Any]] = []
        self.events: "queue.Queue[Optional[tuple[str, Any]]]" = queue.Queue()
        self._dispatcher: Optional[threading.Thread] = None
        self._socket: Optional[socketio.Client] = None

    def _fail(self, exc: ApiRequestError) -> StoreResult:
        with self._lock:
            self.error = exc.message
        return StoreResult(success=False, error=exc.message)

    def fetch(self, *, page: int = 1, limit: int = 20, unread_only: bool = False) -> StoreResult:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if unread_only:
            params["unreadOnly"] = "true"
        try:
            data = self.client.get("/notifications", params=params)
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            self.notifications = list(data.get("notifications", []))
            self.unread_count = int(data.get("unreadCount", 0))
            self.error = None
        return StoreResult(success=True, data=data)

    def fetch_unread_count(self) -> StoreResult:
        try:
            data = self.client.get("/notifications/unread-count")
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            self.unread_count = int(data.get("count", 0))
        return StoreResult(success=True, data=data)

    def mark_read(self, notification_id: int) -> StoreResult:
        try:
            data = self.client.put(f"/notifications/{notification_id}/read")
        except ApiRequestError as exc:
            return self._fail(exc)
        self.apply_event(READ_EVENT, {"id": notification_id})
        return StoreResult(success=True, data=data)

    def mark_all_read(self) -> StoreResult:
        try:
            data = self.client.put("/notifications/read-all")
        except ApiRequestError as exc:
            return self._fail(exc)
        self.apply_event(READ_ALL_EVENT, data)
        return StoreResult(success=True, data=data)

    def delete(self, notification_id: int) -> StoreResult:
        try:
            self.client.delete(f"/notifications/{notification_id}")
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            removed = [n for n in self.notifications if n.get("id") == notification_id]
            self.notifications = [n for n in self.notifications if n.get("id") != notification_id]
            if removed and not removed[0].get("isRead"):
                self.unread_count = max(0, self.unread_count - 1)
        return StoreResult(success=True)

    def apply_event(self, event: str, data: Any) -> None:
        """Apply one relay event to the cached inbox."""

        with self._lock:
            if event == NEW_EVENT:
                if any(n.get("id") == data.get("id") for n in self.notifications):
                    return
                self.notifications = [data, *self.notifications]
                if not data.get("isRead"):
                    self.unread_count += 1
            elif event == READ_EVENT:
                target = (data or {}).get("id")
                for index, item in enumerate(self.notifications):
                    if item.get("id") == target and not item.get("isRead"):
                        self.notifications[index] = {**item, "isRead": True}
                        self.unread_count = max(0, self.unread_count - 1)
                        break
            elif event == READ_ALL_EVENT:
                self.notifications = [{**n, "isRead": True} for n in self.notifications]
                self.unread_count = 0
            else:
                self.domain_events.append((event, data))

    def enqueue(self, event: str, data: Any) -> None:
        self.events.put((event, data))

    def _dispatch(self) -> None:
        while True:
            item = self.events.get()
            try:
                if item is None:
                    return
                event, data = item
                try:
                    self.apply_event(event, data)
                except Exception:  # noqa: BLE001
                    logger.exception("Failed to apply notification event", extra={"event": event})
            finally:
                self.events.task_done()

    def start_dispatcher(self) -> None:
        if self._dispatcher is not None and self._dispatcher.is_alive():
            return
        self._dispatcher = threading.Thread(
            target=self._dispatch, name="wealthwise-notifications", daemon=True
        )
        self._dispatcher.start()

    def stop_dispatcher(self, timeout: Optional[float] = 5.0) -> None:
        if self._dispatcher is None:
            return
        self.events.put(None)
        self._dispatcher.join(timeout)
        self._dispatcher = None

    def _set_connected(self, value: bool) -> None:
        with self._lock:
            self.connected = value

    def connect(self, url: str, token: str, *, client: Optional[socketio.Client] = None) -> None:
        """Open the Socket.IO connection and start relaying events."""

        sio = client or socketio.Client(reconnection=True)
        sio.on("connect", lambda: self._set_connected(True))
        sio.on("disconnect", lambda *args: self._set_connected(False))
        for event in (NEW_EVENT, READ_EVENT, READ_ALL_EVENT, *DOMAIN_EVENTS):
            sio.on(event, lambda data=None, _event=event: self.enqueue(_event, data))
        self.start_dispatcher()
        sio.connect(url, auth={"token": token}, transports=["websocket", "polling"])
        self._socket = sio
        logger.info("Notification socket connected", extra={"url": url})

    def disconnect(self) -> None:
        if self._socket is not None:
            self._socket.disconnect()
            self._socket = None
        self._set_connected(False)
        self.stop_dispatcher()
