"""OpenTelemetry tracing for the identity service.

Spans come from three places: the FastAPI instrumentor (one per request,
health probes excluded), the Redis instrumentor when session state lives in
Redis, and the @traced decorator on application services. Log records get
trace and span ids through the logging instrumentor.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from app.core.config import Settings

logger = logging.getLogger(__name__)

_EXCLUDED_URLS = "/api/v1/health"

_provider: TracerProvider | None = None


def _build_exporter(settings: Settings) -> SpanExporter | None:
    kind = settings.telemetry_exporter
    if kind == "none":
        return None
    if kind == "otlp":
        if not settings.telemetry_otlp_endpoint:
            logger.warning("OTLP exporter selected without an endpoint; spans go to the console")
            return ConsoleSpanExporter()
        endpoint = settings.telemetry_otlp_endpoint
        return OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    if kind != "console":
        logger.warning("Unknown telemetry exporter '%s'; spans go to the console", kind)
    return ConsoleSpanExporter()


def init_tracing(app: FastAPI, settings: Settings) -> TracerProvider | None:
    """Install the global tracer provider and instrument the app.

    Tracing is an aid, never a dependency: any failure here is logged and
    the service starts without spans.
    """
    global _provider
    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled")
        return None
    try:
        provider = TracerProvider(
            resource=Resource(
                attributes={
                    SERVICE_NAME: settings.app_name,
                    SERVICE_VERSION: settings.app_version,
                    "deployment.environment": settings.telemetry_environment,
                }
            ),
            sampler=TraceIdRatioBased(settings.telemetry_sample_rate),
        )
        exporter = _build_exporter(settings)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

        FastAPIInstrumentor.instrument_app(app, tracer_provider=provider, excluded_urls=_EXCLUDED_URLS)
        LoggingInstrumentor().instrument(tracer_provider=provider, set_logging_format=False)
        if settings.session_store_backend == "redis":
            RedisInstrumentor().instrument(tracer_provider=provider)
    except Exception:
        logger.exception("Tracing setup failed; continuing without spans")
        return None

    _provider = provider
    logger.info(
        "Tracing enabled: exporter=%s sample_rate=%s",
        settings.telemetry_exporter,
        settings.telemetry_sample_rate,
    )
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans and drop the provider."""
    global _provider
    if _provider is None:
        return
    try:
        _provider.shutdown()
    except Exception:
        logger.exception("Error flushing spans on shutdown")
    _provider = None
