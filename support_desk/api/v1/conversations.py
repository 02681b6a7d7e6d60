"""Conversation browsing and control handoff endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from support_desk.api.deps import CurrentUser, DbSession, Notifier, require_organization
from support_desk.core.exceptions import NotFoundError
from support_desk.db.repositories import ConversationRepository, MessageRepository
from support_desk.models import Conversation, ConversationStatus, User
from support_desk.schemas import (
    ConversationDetail,
    ConversationList,
    ConversationMessageCreate,
    MessageDetail,
    OutboundMessageResponse,
)
from support_desk.services.handoff import HandoffStateMachine
from support_desk.services.outbound import OutboundRelay

router = APIRouter(prefix="/conversations", tags=["conversations"])


async def _get_conversation(db: DbSession, user: User, conversation_id: UUID) -> Conversation:
    repo = ConversationRepository(db)
    conversation = await repo.get_by_organization(require_organization(user), conversation_id)
    if not conversation:
        raise NotFoundError("Conversation", str(conversation_id))
    return conversation


@router.get("", response_model=ConversationList)
async def list_conversations(
    db: DbSession,
    user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    status: ConversationStatus | None = None,
    agent_id: UUID | None = Query(None, alias="agentId"),
):
    """List conversations, most recently active first."""
    repo = ConversationRepository(db)
    items, total = await repo.list(
        organization_id=require_organization(user),
        skip=skip,
        limit=limit,
        status=status,
        agent_id=agent_id,
    )
    return ConversationList(items=items, total=total, skip=skip, limit=limit)


@router.get("/{conversation_id}", response_model=ConversationDetail)
async def get_conversation(conversation_id: UUID, db: DbSession, user: CurrentUser):
    """Get conversation details."""
    return await _get_conversation(db, user, conversation_id)


@router.get("/{conversation_id}/messages", response_model=list[MessageDetail])
async def list_messages(
    conversation_id: UUID,
    db: DbSession,
    user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=1000),
):
    """List a conversation's messages, oldest first."""
    conversation = await _get_conversation(db, user, conversation_id)
    return await MessageRepository(db).list_for_conversation(
        conversation.id, skip=skip, limit=limit
    )


@router.post("/{conversation_id}/take-control", response_model=ConversationDetail)
async def take_control(
    conversation_id: UUID, db: DbSession, user: CurrentUser, notifier: Notifier
):
    """Stop the AI from answering and let the caller reply."""
    conversation = await _get_conversation(db, user, conversation_id)
    return await HandoffStateMachine(db, notifier).take_control(conversation, user)


@router.post("/{conversation_id}/return-to-ai", response_model=ConversationDetail)
async def return_to_ai(
    conversation_id: UUID, db: DbSession, user: CurrentUser, notifier: Notifier
):
    """Hand the conversation back to the AI."""
    conversation = await _get_conversation(db, user, conversation_id)
    return await HandoffStateMachine(db, notifier).return_to_ai(conversation, user)


@router.post("/{conversation_id}/messages", response_model=OutboundMessageResponse)
async def send_message(
    conversation_id: UUID,
    data: ConversationMessageCreate,
    db: DbSession,
    user: CurrentUser,
    notifier: Notifier,
):
    """Reply through the conversation's own agent."""
    conversation = await _get_conversation(db, user, conversation_id)
    result = await OutboundRelay(db, notifier).send(
        user, conversation.id, conversation.agent_id, data.message
    )
    return OutboundMessageResponse(
        webhook_status=result.webhook_status, message_id=result.message.id
    )
