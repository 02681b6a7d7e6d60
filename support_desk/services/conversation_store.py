"""Transactional writes for conversations and their messages."""

from dataclasses import dataclass
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.core.exceptions import (
    DuplicateConversationError,
    NotAuthorizedError,
    NotFoundError,
    PartialWriteError,
)
from support_desk.core.observability import ConversationObserver, default_observer
from support_desk.db.repositories import ConversationRepository, MessageRepository
from support_desk.models import Conversation, ConversationStatus, Message, SenderType
from support_desk.models.base import utcnow
from support_desk.services.resolver import ResolutionDecision


@dataclass
class InboundResult:
    """What ``append_inbound`` wrote."""

    conversation: Conversation
    message: Message
    is_new: bool
    agent_link_attached: bool = False


class ConversationStore:
    """Applies resolution decisions and human replies atomically.

    Every operation stages its writes in the session and commits once. If a
    step fails after another already reached the database, the transaction
    is rolled back and ``PartialWriteError`` reports which steps had been
    applied.
    """

    def __init__(
        self,
        db: AsyncSession,
        observer: ConversationObserver = default_observer,
    ):
        self.db = db
        self.observer = observer
        self.conversations = ConversationRepository(db)
        self.messages = MessageRepository(db)

    async def _fail(
        self,
        operation: str,
        steps: list[str],
        conversation_id: UUID | None,
        error: Exception,
    ) -> None:
        await self.db.rollback()
        if steps:
            self.observer.partial_write(operation, steps, conversation_id, error)
            raise PartialWriteError(operation, steps, conversation_id) from error
        raise error

    async def append_inbound(
        self,
        decision: ResolutionDecision,
        client_phone: str,
        client_name: str | None,
        content: str,
        sender_type: SenderType = SenderType.CLIENT,
    ) -> InboundResult:
        """Record an inbound message according to ``decision``.

        Raises:
            DuplicateConversationError: A concurrent request created the
                conversation first
            PartialWriteError: A later step failed; nothing was kept
        """
        if decision.is_new:
            return await self._append_to_new(decision, client_phone, client_name, content, sender_type)
        return await self._append_to_existing(decision, client_name, content, sender_type)

    async def _append_to_new(
        self,
        decision: ResolutionDecision,
        client_phone: str,
        client_name: str | None,
        content: str,
        sender_type: SenderType,
    ) -> InboundResult:
        steps: list[str] = []
        conversation_id = uuid4()
        now = utcnow()

        try:
            conversation = await self.conversations.add(
                id=conversation_id,
                agent_id=decision.agent_id,
                organization_id=decision.organization_id,
                client_phone=client_phone,
                client_phone_key=decision.phone_key,
                client_name=client_name or client_phone,
                status=ConversationStatus.AI_ACTIVE,
                last_message_at=now,
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateConversationError(decision.agent_id, decision.phone_key) from e
        steps.append("create_conversation")

        try:
            message = await self.messages.add(
                conversation_id=conversation.id,
                sender_type=sender_type,
                content=content,
                sender_name=client_name if sender_type == SenderType.CLIENT else None,
            )
            steps.append("create_message")
            await self.db.commit()
        except Exception as e:
            await self._fail("append_inbound", steps, conversation_id, e)

        return InboundResult(conversation=conversation, message=message, is_new=True)

    async def _append_to_existing(
        self,
        decision: ResolutionDecision,
        client_name: str | None,
        content: str,
        sender_type: SenderType,
    ) -> InboundResult:
        steps: list[str] = []
        conversation = await self.conversations.get(decision.conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation", str(decision.conversation_id))

        try:
            conversation.last_message_at = utcnow()
            if decision.attach_agent_link:
                conversation.agent_id = decision.agent_id
                conversation.organization_id = decision.organization_id
            # Duplicates may still hold the key until they are merged
            if conversation.client_phone_key is None and not decision.duplicate_ids:
                conversation.client_phone_key = decision.phone_key
            if client_name and client_name != conversation.client_name and (
                not conversation.client_name
                or conversation.client_name == conversation.client_phone
            ):
                conversation.client_name = client_name
            await self.db.flush()
            steps.append("update_conversation")

            message = await self.messages.add(
                conversation_id=conversation.id,
                sender_type=sender_type,
                content=content,
                sender_name=client_name if sender_type == SenderType.CLIENT else None,
            )
            steps.append("create_message")
            await self.db.commit()
        except Exception as e:
            await self._fail("append_inbound", steps, conversation.id, e)

        if decision.attach_agent_link:
            self.observer.agent_link_repaired(decision.agent_id, conversation.id)

        return InboundResult(
            conversation=conversation,
            message=message,
            is_new=False,
            agent_link_attached=decision.attach_agent_link,
        )

    async def append_outbound(
        self,
        conversation: Conversation,
        content: str,
        sender_name: str | None = None,
    ) -> Message:
        """Record a human reply on a conversation the human controls.

        Raises:
            NotAuthorizedError: The conversation is not HUMAN_ACTIVE; nothing
                is written
        """
        if conversation.status != ConversationStatus.HUMAN_ACTIVE:
            raise NotAuthorizedError()

        steps: list[str] = []
        try:
            message = await self.messages.add(
                conversation_id=conversation.id,
                sender_type=SenderType.HUMAN,
                content=content,
                sender_name=sender_name,
            )
            steps.append("create_message")

            conversation.last_message_at = utcnow()
            await self.db.flush()
            steps.append("update_conversation")
            await self.db.commit()
        except Exception as e:
            await self._fail("append_outbound", steps, conversation.id, e)

        return message
