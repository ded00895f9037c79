"""OpenTelemetry tracing, enabled with ``OTEL_ENABLED``.

Spans cover inbound FastAPI requests and SQLAlchemy statements. Without an
OTLP endpoint the provider is still installed so span context propagates,
but nothing is exported.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from users_api.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

_tracer_provider: TracerProvider | None = None


def configure_tracing(
    service_name: str = "users-api",
    service_version: str = "0.1.0",
    environment: str = "development",
    otlp_endpoint: str | None = None,
) -> TracerProvider:
    """Install a global tracer provider for this process.

    Args:
        service_name: ``service.name`` resource attribute
        service_version: ``service.version`` resource attribute
        environment: ``deployment.environment`` resource attribute
        otlp_endpoint: gRPC collector address; spans are exported only if set
    """
    global _tracer_provider

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": service_name,
                "service.version": service_version,
                "deployment.environment": environment,
            }
        )
    )
    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )

    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    logger.info(
        "Tracing configured",
        extra={"otel_service": service_name, "otlp_endpoint": otlp_endpoint or None},
    )
    return provider


def instrument_fastapi(app: Any) -> None:
    FastAPIInstrumentor.instrument_app(app, excluded_urls="health,live,ready,metrics")


def instrument_sqlalchemy(engine: Any) -> None:
    """Trace statements on ``engine`` (pass ``AsyncEngine.sync_engine``)."""
    SQLAlchemyInstrumentor().instrument(engine=engine)


def shutdown_tracing() -> None:
    """Flush pending spans and drop the provider."""
    global _tracer_provider

    if _tracer_provider is None:
        return
    _tracer_provider.shutdown()
    _tracer_provider = None
