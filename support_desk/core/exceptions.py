"""Error taxonomy surfaced to API callers.

Every HTTP-facing error carries a stable ``code`` and a human-readable
``message`` so the dashboard and automations can branch on the code without
parsing text. Store-level failures that must never reach a caller verbatim
(``PartialWriteError``, ``DuplicateConversationError``) are plain exceptions.
"""

from typing import Any
from uuid import UUID

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for errors returned with a stable error code."""

    code = "error"

    def __init__(self, status_code: int, message: str, **extra: Any):
        self.message = message
        detail = {"code": self.code, "message": message, **extra}
        super().__init__(status_code=status_code, detail=detail)


class BadRequestError(AppError):
    """Exception raised for missing or malformed input."""

    code = "bad_request"

    def __init__(self, message: str, **extra: Any):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, **extra)


class UnauthorizedError(AppError):
    """Exception raised for authentication failures."""

    code = "unauthorized"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message)


class ForbiddenError(AppError):
    """Exception raised when access to a resource is forbidden."""

    code = "forbidden"

    def __init__(self, message: str = "Access to this resource is forbidden"):
        super().__init__(status.HTTP_403_FORBIDDEN, message)


class NotFoundError(AppError):
    """Exception raised when a resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str | UUID):
        super().__init__(
            status.HTTP_404_NOT_FOUND,
            f"{resource} with id '{identifier}' not found",
        )


class NotAuthorizedError(AppError):
    """Raised when the conversation's control state forbids the requested send."""

    code = "not_authorized"

    def __init__(self, message: str = "Take control of the conversation before sending"):
        super().__init__(status.HTTP_409_CONFLICT, message)


class InvalidTransitionError(AppError):
    """Raised when a handoff transition is not allowed from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"Cannot {requested} while conversation is {current}",
            status=current,
        )


class ConflictError(AppError):
    """Exception raised when there's a resource conflict."""

    code = "conflict"

    def __init__(self, message: str):
        super().__init__(status.HTTP_409_CONFLICT, message)


class DeliveryError(AppError):
    """Raised when relaying a recorded message to the agent's webhook fails.

    The message is already persisted; the response carries its id so the
    dashboard can offer a retry.
    """

    code = "delivery_failed"

    def __init__(
        self,
        message: str,
        message_id: UUID | None = None,
        webhook_status: int | None = None,
    ):
        self.message_id = message_id
        self.webhook_status = webhook_status
        super().__init__(
            status.HTTP_502_BAD_GATEWAY,
            message,
            messageId=str(message_id) if message_id else None,
            webhookStatus=webhook_status,
        )


class PartialWriteError(Exception):
    """A multi-record write failed after some of its steps were applied.

    Raised only after the store has rolled the transaction back, so nothing
    from the failed write is visible to later readers.
    """

    def __init__(self, operation: str, steps_applied: list[str], conversation_id: UUID | None):
        self.operation = operation
        self.steps_applied = steps_applied
        self.conversation_id = conversation_id
        super().__init__(
            f"{operation} failed after {', '.join(steps_applied)} "
            f"(conversation {conversation_id}); rolled back"
        )


class DuplicateConversationError(Exception):
    """Another request created the open conversation for this agent and phone first."""

    def __init__(self, agent_id: UUID, phone_key: str):
        self.agent_id = agent_id
        self.phone_key = phone_key
        super().__init__(f"Conversation for agent {agent_id} and phone {phone_key} already exists")
