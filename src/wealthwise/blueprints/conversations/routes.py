"""Stored assistant conversations; no model is ever called from here."""

from __future__ import annotations

from flask import request

from ...errors import ApiError
from ...extensions import get_context
from ...models.conversation import AIConversation
from ...responses import created, success
from ...security import current_user, login_required
from ...services.serializers import conversation_to_dict
from ..forms import query_flag
from . import bp
from .forms import ConversationForm, MessageForm


def _get_conversation(conversation_id: int) -> AIConversation:
    conversation = get_context().conversation_repo.get_by_id(
        conversation_id, user_id=current_user().id
    )
    if conversation is None:
        raise ApiError.not_found("Conversation not found")
    return conversation


@bp.get("/")
@login_required
def list_conversations():
    conversations = get_context().conversation_repo.list_all(
        user_id=current_user().id,
        include_archived=bool(query_flag(request.args, "includeArchived")),
    )
    return success(
        [conversation_to_dict(c, with_messages=False) for c in conversations],
        "Conversations retrieved successfully",
    )


@bp.post("/")
@login_required
def create_conversation():
    data = ConversationForm.from_mapping(request.get_json(silent=True)).validated()
    conversation = AIConversation(
        title=data.get("title") or "", context_type=data.get("context_type", "general")
    )
    if data.get("message"):
        conversation.add_message("user", data["message"])
    conversation = get_context().conversation_repo.create(
        conversation, user_id=current_user().id
    )
    return created(conversation_to_dict(conversation), "Conversation created successfully")


@bp.get("/<int:conversation_id>")
@login_required
def get_conversation(conversation_id: int):
    return success(
        conversation_to_dict(_get_conversation(conversation_id)),
        "Conversation retrieved successfully",
    )


@bp.post("/<int:conversation_id>/messages")
@login_required
def add_message(conversation_id: int):
    data = MessageForm.from_mapping(request.get_json(silent=True)).validated()
    conversation = _get_conversation(conversation_id)
    message = conversation.add_message(data.get("role", "user"), data["content"])
    conversation = get_context().conversation_repo.update(
        conversation, user_id=current_user().id
    )
    return created(
        {"message": message, "conversation": conversation_to_dict(conversation)},
        "Message added successfully",
    )


@bp.put("/<int:conversation_id>/archive")
@login_required
def archive(conversation_id: int):
    conversation = _get_conversation(conversation_id)
    payload = request.get_json(silent=True) or {}
    archived = payload.get("archived", not conversation.is_archived)
    if not isinstance(archived, bool):
        raise ApiError.bad_request("archived must be true or false")
    conversation.is_archived = archived
    conversation = get_context().conversation_repo.update(
        conversation, user_id=current_user().id
    )
    message = "Conversation archived" if archived else "Conversation unarchived"
    return success(conversation_to_dict(conversation, with_messages=False), message)


@bp.delete("/<int:conversation_id>")
@login_required
def delete_conversation(conversation_id: int):
    if not get_context().conversation_repo.delete(conversation_id, user_id=current_user().id):
        raise ApiError.not_found("Conversation not found")
    return success(None, "Conversation deleted successfully")
