"""Control handoff between the AI and a human operator."""

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.core.exceptions import InvalidTransitionError
from support_desk.core.observability import ConversationObserver, default_observer
from support_desk.db.repositories import AuditLogRepository
from support_desk.models import AuditAction, Conversation, ConversationStatus, User
from support_desk.services.realtime import RealtimeNotifier


class HandoffStateMachine:
    """Moves conversations between AI_ACTIVE and HUMAN_ACTIVE.

    Each transition writes its audit entry in the same transaction as the
    status change, then broadcasts the updated conversation. ARCHIVED is
    terminal and reachable from neither transition.
    """

    def __init__(
        self,
        db: AsyncSession,
        notifier: RealtimeNotifier | None = None,
        observer: ConversationObserver = default_observer,
    ):
        self.db = db
        self.notifier = notifier
        self.observer = observer
        self.audit_logs = AuditLogRepository(db)

    @staticmethod
    def can_send(conversation: Conversation) -> bool:
        """Whether a human may post to the conversation right now."""
        return conversation.status == ConversationStatus.HUMAN_ACTIVE

    async def take_control(self, conversation: Conversation, user: User) -> Conversation:
        """Hand the conversation to ``user``.

        Raises:
            InvalidTransitionError: The conversation is not AI_ACTIVE
        """
        if conversation.status != ConversationStatus.AI_ACTIVE:
            raise InvalidTransitionError(conversation.status.value, "take control")

        return await self._transition(
            conversation,
            user,
            ConversationStatus.HUMAN_ACTIVE,
            active_user_id=user.id,
            action=AuditAction.TAKE_CONTROL,
            details=f"{user.name} took control of the conversation",
        )

    async def return_to_ai(self, conversation: Conversation, user: User) -> Conversation:
        """Give the conversation back to the AI.

        Raises:
            InvalidTransitionError: The conversation is not HUMAN_ACTIVE
        """
        if conversation.status != ConversationStatus.HUMAN_ACTIVE:
            raise InvalidTransitionError(conversation.status.value, "return to AI")

        return await self._transition(
            conversation,
            user,
            ConversationStatus.AI_ACTIVE,
            active_user_id=None,
            action=AuditAction.RETURN_TO_AI,
            details=f"{user.name} returned the conversation to the AI",
        )

    async def _transition(
        self,
        conversation: Conversation,
        user: User,
        target: ConversationStatus,
        *,
        active_user_id,
        action: AuditAction,
        details: str,
    ) -> Conversation:
        previous = conversation.status
        conversation.status = target
        conversation.active_user_id = active_user_id
        await self.audit_logs.add(
            user_id=user.id,
            conversation_id=conversation.id,
            agent_id=conversation.agent_id,
            action=action,
            details=details,
        )
        await self.db.commit()
        await self.db.refresh(conversation)

        self.observer.control_changed(conversation.id, user.id, previous.value, target.value)
        if self.notifier and user.organization_id:
            await self.notifier.conversation_updated(user.organization_id, conversation)
        return conversation
