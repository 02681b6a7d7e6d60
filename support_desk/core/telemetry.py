"""OpenTelemetry tracing for requests, webhook calls, queries and the debug inbox."""

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from support_desk.config import settings

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Requests that would only add noise to traces
EXCLUDED_URLS = "health,api/docs,api/redoc,api/openapi.json"

_provider: TracerProvider | None = None


def _build_provider() -> TracerProvider:
    resource = Resource.create(
        {
            "service.name": settings.OTEL_SERVICE_NAME,
            "service.version": "1.0.0",
            "deployment.environment": "development" if settings.DEBUG else "production",
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT, insecure=True)
        )
    )
    return provider


def setup_tracing(app: "FastAPI") -> bool:
    """Export spans to the configured OTLP collector.

    Instruments the app's routes plus outbound webhook calls (httpx), database
    queries (SQLAlchemy) and the webhook debug inbox (Redis). Does nothing
    when no endpoint is configured.

    Returns:
        Whether tracing was enabled
    """
    global _provider

    if not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        logger.info("Tracing disabled: OTEL_EXPORTER_OTLP_ENDPOINT not configured")
        return False

    try:
        _provider = _build_provider()
        trace.set_tracer_provider(_provider)

        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=_provider, excluded_urls=EXCLUDED_URLS
        )
        HTTPXClientInstrumentor().instrument(tracer_provider=_provider)
        SQLAlchemyInstrumentor().instrument(tracer_provider=_provider, enable_commenter=True)
        RedisInstrumentor().instrument(tracer_provider=_provider)
    except Exception as e:
        # The API keeps serving without traces
        logger.warning(f"Failed to setup tracing: {e}")
        _provider = None
        return False

    logger.info(f"Tracing enabled: exporting to {settings.OTEL_EXPORTER_OTLP_ENDPOINT}")
    return True


def shutdown_tracing() -> None:
    """Flush pending spans before the process exits."""
    global _provider

    if _provider is not None:
        _provider.shutdown()
        _provider = None


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer for manual spans.

    Spans are no-ops until ``setup_tracing`` enabled export.
    """
    return trace.get_tracer(name)
