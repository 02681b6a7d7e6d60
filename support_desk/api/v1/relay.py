"""Outbound relay endpoint for human replies."""

from fastapi import APIRouter

from support_desk.api.deps import CurrentUser, DbSession, Notifier
from support_desk.schemas import OutboundMessageRequest, OutboundMessageResponse
from support_desk.services.outbound import OutboundRelay

router = APIRouter(prefix="/n8n", tags=["relay"])


@router.post("/send-message", response_model=OutboundMessageResponse)
async def send_message(
    data: OutboundMessageRequest,
    db: DbSession,
    user: CurrentUser,
    notifier: Notifier,
):
    """Record a human reply and deliver it to the agent's webhook.

    Requires the conversation to be under human control. If delivery fails
    the reply stays recorded and a 502 carries its ``messageId``.
    """
    result = await OutboundRelay(db, notifier).send(
        user, data.conversation_id, data.agent_id, data.message
    )
    return OutboundMessageResponse(
        webhook_status=result.webhook_status, message_id=result.message.id
    )
