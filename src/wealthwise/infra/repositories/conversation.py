"""SQLModel implementation of Conversation repository."""

from __future__ import annotations

from sqlmodel import select

from ...models.conversation import AIConversation
from .base import UserScopedRepository


class SQLModelConversationRepository(UserScopedRepository[AIConversation]):
    model = AIConversation

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[AIConversation]:
        with self.session_factory() as session:
            statement = select(AIConversation).where(AIConversation.user_id == user_id)
            if not include_archived:
                statement = statement.where(AIConversation.is_archived == False)  # noqa: E712
            statement = statement.order_by(
                AIConversation.last_message_at.desc(), AIConversation.id.desc()  # type: ignore
            )
            return self._fetch(session, statement)
