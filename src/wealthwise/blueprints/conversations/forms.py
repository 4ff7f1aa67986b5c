"""Conversation payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import CONVERSATION_CONTEXTS, MESSAGE_ROLES
from ..forms import PayloadForm


@dataclass(slots=True)
class ConversationForm(PayloadForm):
    def clean(self) -> None:
        self._text("title", "title", "Title", max_length=100)
        self._choice("contextType", "context_type", "Context type", CONVERSATION_CONTEXTS)
        self._text("message", "message", "Message", max_length=4000)


@dataclass(slots=True)
class MessageForm(PayloadForm):
    def clean(self) -> None:
        self._choice("role", "role", "Role", MESSAGE_ROLES)
        self._text("content", "content", "Content", required=True, max_length=4000)
