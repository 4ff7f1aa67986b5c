"""Conversation repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.conversation import AIConversation


class ConversationRepository(Protocol):
    def get_by_id(self, conversation_id: int, *, user_id: int) -> Optional[AIConversation]:
        ...

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[AIConversation]:
        ...

    def create(self, conversation: AIConversation, *, user_id: int) -> AIConversation:
        ...

    def update(self, conversation: AIConversation, *, user_id: int) -> AIConversation:
        ...

    def delete(self, conversation_id: int, *, user_id: int) -> bool:
        ...
