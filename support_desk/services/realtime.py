"""In-process WebSocket fan-out scoped by organization."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from support_desk.models import Conversation, Message
from support_desk.schemas import ConversationDetail, MessageDetail

logger = logging.getLogger(__name__)


class EventSocket(Protocol):
    """The part of a WebSocket the registry uses."""

    async def send_json(self, data: Any) -> None: ...


@dataclass
class _Connection:
    organization_id: UUID
    user_id: UUID


class ConnectionRegistry:
    """Tracks authenticated dashboard sockets per organization.

    Delivery is at most once: a socket whose send fails is dropped and the
    dashboard recovers by querying.
    """

    def __init__(self):
        self._by_org: dict[UUID, set[EventSocket]] = defaultdict(set)
        self._meta: dict[EventSocket, _Connection] = {}

    def add(self, websocket: EventSocket, organization_id: UUID, user_id: UUID) -> None:
        """Register an authenticated socket."""
        self._by_org[organization_id].add(websocket)
        self._meta[websocket] = _Connection(organization_id, user_id)
        logger.info(
            f"WS connected user={user_id} org={organization_id} "
            f"connections={len(self._by_org[organization_id])}"
        )

    def remove(self, websocket: EventSocket) -> None:
        """Unregister a socket. Unknown sockets are ignored."""
        meta = self._meta.pop(websocket, None)
        if meta is None:
            return
        sockets = self._by_org.get(meta.organization_id)
        if sockets is not None:
            sockets.discard(websocket)
            if not sockets:
                del self._by_org[meta.organization_id]
        logger.info(f"WS disconnected user={meta.user_id} org={meta.organization_id}")

    def connection_count(self, organization_id: UUID | None = None) -> int:
        """Open sockets for one organization, or for all when none is given."""
        if organization_id is None:
            return len(self._meta)
        return len(self._by_org.get(organization_id, ()))

    async def broadcast(self, organization_id: UUID, event: dict[str, Any]) -> int:
        """Send ``event`` to every socket of the organization.

        Returns:
            Number of sockets the event reached
        """
        delivered = 0
        dead = []
        for websocket in list(self._by_org.get(organization_id, ())):
            try:
                await websocket.send_json(event)
                delivered += 1
            except Exception as e:
                logger.debug(f"Dropping WS after failed send: {e}")
                dead.append(websocket)

        for websocket in dead:
            self.remove(websocket)
        return delivered


def new_message_event(conversation_id: UUID, message: Message) -> dict[str, Any]:
    return {
        "type": "new_message",
        "conversationId": str(conversation_id),
        "message": MessageDetail.model_validate(message).model_dump(mode="json", by_alias=True),
    }


def conversation_updated_event(conversation: Conversation) -> dict[str, Any]:
    return {
        "type": "conversation_updated",
        "conversation": ConversationDetail.model_validate(conversation).model_dump(
            mode="json", by_alias=True
        ),
    }


class RealtimeNotifier:
    """Publishes conversation events to an organization's dashboards."""

    def __init__(self, registry: ConnectionRegistry | None = None):
        self.registry = registry or ConnectionRegistry()

    async def new_message(
        self, organization_id: UUID, conversation_id: UUID, message: Message
    ) -> int:
        return await self.registry.broadcast(
            organization_id, new_message_event(conversation_id, message)
        )

    async def conversation_updated(
        self, organization_id: UUID, conversation: Conversation
    ) -> int:
        return await self.registry.broadcast(
            organization_id, conversation_updated_event(conversation)
        )
