"""Shared plumbing for user-scoped SQLModel repositories."""

from __future__ import annotations

from typing import Callable, ClassVar, ContextManager, Generic, Optional, TypeVar

from sqlmodel import Session, SQLModel, select

ModelT = TypeVar("ModelT", bound=SQLModel)


class UserScopedRepository(Generic[ModelT]):
    """CRUD for tables carrying a ``user_id`` column.

    Every returned instance is expunged so callers can use it after the
    session closes.
    """

    model: ClassVar[type]

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _owned(self, session: Session, obj_id: int, user_id: int) -> Optional[ModelT]:
        return session.exec(
            select(self.model)
            .where(self.model.id == obj_id)
            .where(self.model.user_id == user_id)
        ).first()

    def get_by_id(self, obj_id: int, *, user_id: int) -> Optional[ModelT]:
        with self.session_factory() as session:
            obj = self._owned(session, obj_id, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def create(self, obj: ModelT, *, user_id: int) -> ModelT:
        with self.session_factory() as session:
            obj.user_id = user_id
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj

    def update(self, obj: ModelT, *, user_id: int) -> ModelT:
        with self.session_factory() as session:
            if obj.id is None or self._owned(session, obj.id, user_id) is None:
                raise LookupError(f"{self.model.__name__} {obj.id} not found")
            obj.user_id = user_id
            if hasattr(obj, "touch"):
                obj.touch()
            merged = session.merge(obj)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, obj_id: int, *, user_id: int) -> bool:
        with self.session_factory() as session:
            obj = self._owned(session, obj_id, user_id)
            if obj is None:
                return False
            session.delete(obj)
            session.commit()
            return True

    def _fetch(self, session: Session, statement) -> list[ModelT]:
        rows = list(session.exec(statement).all())
        session.expunge_all()
        return rows
