"""Core module for configuration-independent building blocks."""

from support_desk.core.exceptions import (
    BadRequestError,
    DeliveryError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    PartialWriteError,
    UnauthorizedError,
)
from support_desk.core.phone import normalize_phone
from support_desk.core.telemetry import get_tracer, setup_tracing, shutdown_tracing

__all__ = [
    "BadRequestError",
    "DeliveryError",
    "InvalidTransitionError",
    "NotAuthorizedError",
    "NotFoundError",
    "PartialWriteError",
    "UnauthorizedError",
    "normalize_phone",
    "get_tracer",
    "setup_tracing",
    "shutdown_tracing",
]
