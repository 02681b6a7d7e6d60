"""Observability hooks for the conversation core.

Services take a ``ConversationObserver`` and report what happened; they never
log on their own. The default observer writes leveled log records with
structured ``extra`` fields and tags the active OpenTelemetry span. Tests swap
in a recording subclass.
"""

import logging
from uuid import UUID

from opentelemetry import trace

logger = logging.getLogger("support_desk.conversations")


def _ids(**values) -> dict[str, str]:
    return {key: str(value) for key, value in values.items() if value is not None}


class ConversationObserver:
    """Default observer: leveled logs plus span attributes."""

    def _emit(self, level: int, event: str, message: str, **fields) -> None:
        extra = {"event": event, **_ids(**fields)}
        logger.log(level, message, extra=extra)

        span = trace.get_current_span()
        if span.is_recording():
            span.add_event(event, attributes=_ids(**fields))

    def conversation_resolved(
        self,
        agent_id: UUID,
        phone_key: str,
        conversation_id: UUID | None,
        is_new: bool,
        attach_agent_link: bool,
    ) -> None:
        self._emit(
            logging.DEBUG,
            "conversation.resolved",
            f"Resolved phone {phone_key} for agent {agent_id}: "
            f"{'new conversation' if is_new else conversation_id}",
            agent_id=agent_id,
            conversation_id=conversation_id,
            is_new=is_new,
            attach_agent_link=attach_agent_link,
        )

    def duplicates_detected(
        self, agent_id: UUID, phone_key: str, kept: UUID, duplicates: tuple[UUID, ...]
    ) -> None:
        self._emit(
            logging.WARNING,
            "conversation.duplicates",
            f"{len(duplicates)} duplicate conversation(s) for agent {agent_id} "
            f"and phone {phone_key}; using {kept}",
            agent_id=agent_id,
            conversation_id=kept,
            duplicates=",".join(str(d) for d in duplicates),
        )

    def agent_link_repaired(self, agent_id: UUID, conversation_id: UUID) -> None:
        self._emit(
            logging.INFO,
            "conversation.agent_link_repaired",
            f"Attached missing agent link {agent_id} to conversation {conversation_id}",
            agent_id=agent_id,
            conversation_id=conversation_id,
        )

    def partial_write(
        self,
        operation: str,
        steps_applied: list[str],
        conversation_id: UUID | None,
        error: BaseException,
    ) -> None:
        self._emit(
            logging.ERROR,
            "store.partial_write",
            f"Partial write in {operation} after {steps_applied}: {error!r}; rolled back",
            operation=operation,
            conversation_id=conversation_id,
            steps_applied=",".join(steps_applied),
        )

    def ai_message_during_human_control(
        self, agent_id: UUID, conversation_id: UUID, policy: str
    ) -> None:
        self._emit(
            logging.WARNING,
            "handoff.ai_while_human_active",
            f"AI message for conversation {conversation_id} while a human holds it "
            f"(policy={policy})",
            agent_id=agent_id,
            conversation_id=conversation_id,
            policy=policy,
        )

    def control_changed(
        self, conversation_id: UUID, user_id: UUID, previous: str, current: str
    ) -> None:
        self._emit(
            logging.INFO,
            "handoff.control_changed",
            f"Conversation {conversation_id}: {previous} -> {current} by user {user_id}",
            conversation_id=conversation_id,
            user_id=user_id,
            previous=previous,
            current=current,
        )

    def delivery_succeeded(
        self, agent_id: UUID, conversation_id: UUID, message_id: UUID, status_code: int
    ) -> None:
        self._emit(
            logging.INFO,
            "relay.delivered",
            f"Relayed message {message_id} to agent {agent_id} webhook ({status_code})",
            agent_id=agent_id,
            conversation_id=conversation_id,
            message_id=message_id,
            status_code=status_code,
        )

    def delivery_failed(
        self,
        agent_id: UUID,
        conversation_id: UUID,
        message_id: UUID,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        self._emit(
            logging.WARNING,
            "relay.failed",
            f"Relay of message {message_id} to agent {agent_id} failed: {reason}",
            agent_id=agent_id,
            conversation_id=conversation_id,
            message_id=message_id,
            status_code=status_code,
        )


default_observer = ConversationObserver()
