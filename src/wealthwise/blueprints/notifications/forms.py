"""Notification payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import NOTIFICATION_TYPES, PRIORITIES
from ..forms import PayloadForm


@dataclass(slots=True)
class NotificationForm(PayloadForm):
    def clean(self) -> None:
        self._choice("type", "type", "Notification type", NOTIFICATION_TYPES)
        self._text("title", "title", "Title", required=True, max_length=100)
        self._text("message", "message", "Message", required=True, max_length=500)
        self._choice("priority", "priority", "Priority", PRIORITIES)
        self._text("actionUrl", "action_url", "Action URL", max_length=255, nullable=True)
        data = self.raw_data.get("data")
        if data is not None and not isinstance(data, dict):
            self._add_error("data", "Data must be an object")
        elif data is not None:
            self.cleaned["data"] = data
