"""HTTP client delivering human replies to an agent's webhook."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from support_desk.config import settings
from support_desk.models import Agent, WebhookAuth

logger = logging.getLogger(__name__)


@dataclass
class DeliveryResult:
    """Outcome of one POST to an agent webhook."""

    ok: bool
    status_code: int | None = None
    error: str | None = None


class AgentWebhookClient:
    """Posts relayed messages to the URL configured on an agent.

    Makes exactly one attempt per call; retries are left to the dashboard.
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout or settings.OUTBOUND_WEBHOOK_TIMEOUT
        self.transport = transport

    def build_request(self, agent: Agent, body: dict[str, Any]) -> tuple[dict[str, Any], dict[str, str]]:
        """Apply the agent's auth convention to a JSON body.

        Returns:
            The body to send and the headers to send it with
        """
        headers = {"Content-Type": "application/json"}
        if agent.webhook_auth == WebhookAuth.BODY:
            body = {**body, "apiToken": agent.api_token}
        else:
            headers["Authorization"] = f"Bearer {agent.api_token}"
        return body, headers

    async def deliver(self, agent: Agent, body: dict[str, Any]) -> DeliveryResult:
        """POST ``body`` to the agent's webhook.

        Never raises for network or HTTP failures; the result says what happened.
        """
        json_body, headers = self.build_request(agent, body)
        logger.info(f"Agent webhook request: POST {agent.webhook_url} (agent: {agent.id})")

        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport
        ) as client:
            try:
                response = await client.post(agent.webhook_url, json=json_body, headers=headers)
            except httpx.TimeoutException:
                logger.error(f"Agent webhook timed out after {self.timeout}s (agent: {agent.id})")
                return DeliveryResult(ok=False, error=f"Timed out after {self.timeout}s")
            except httpx.RequestError as e:
                logger.error(f"Agent webhook connection error: {e}")
                return DeliveryResult(ok=False, error=f"Connection error: {e}")

        logger.info(f"Agent webhook response: {response.status_code}")
        if response.is_success:
            return DeliveryResult(ok=True, status_code=response.status_code)

        logger.error(f"Agent webhook error: {response.status_code} - {response.text[:500]}")
        return DeliveryResult(
            ok=False,
            status_code=response.status_code,
            error=f"Webhook responded with HTTP {response.status_code}",
        )
