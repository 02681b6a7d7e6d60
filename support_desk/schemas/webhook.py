"""Wire schemas for the inbound webhook and the outbound relay."""

from uuid import UUID

from pydantic import Field

from support_desk.schemas.common import CamelModel


class InboundMessagePayload(CamelModel):
    """Message posted by the automation (client message or AI reply).

    Every field is optional at the schema level so missing values produce the
    documented 400 with the list of required fields instead of a 422.
    """

    agent_id: str | None = None
    api_token: str | None = None
    client_phone: str | None = None
    client_name: str | None = None
    message: str | None = None
    sender_type: str | None = Field(
        None, description="'CLIENT' (default) or 'AI'"
    )


class InboundMessageResponse(CamelModel):
    """Result of an accepted inbound message."""

    success: bool = True
    conversation_id: UUID
    message_id: UUID


class OutboundMessageRequest(CamelModel):
    """Human reply to relay through an agent's webhook."""

    conversation_id: UUID
    agent_id: UUID
    message: str = Field(..., min_length=1)


class OutboundMessageResponse(CamelModel):
    """Result of a recorded and delivered human reply."""

    success: bool = True
    webhook_status: int
    message_id: UUID
