"""OpenTelemetry and logging setup for the storefront client."""

import logging
import os
import sys

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

DEFAULT_OTLP_ENDPOINT = "http://localhost:4318"

_instrumented = False


def _otlp_endpoint() -> str:
    return os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT).rstrip("/")


def get_service_resource() -> Resource:
    """Build the resource attached to every span and metric.

    Returns:
        Resource naming the storefront client and its deployment environment
    """
    return Resource.create(
        {
            "service.name": os.getenv("OTEL_SERVICE_NAME", "storefront"),
            "service.namespace": "restaurant",
            "deployment.environment": os.getenv("ENVIRONMENT", "development"),
        }
    )


def setup_tracing(resource: Resource) -> None:
    """Install a tracer provider that batches spans to the OTLP HTTP endpoint."""
    endpoint = _otlp_endpoint()
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces")))
    trace.set_tracer_provider(provider)

    logger.info(f"Span export enabled to {endpoint}")


def setup_metrics(resource: Resource, export_interval_millis: int = 60000) -> None:
    """Install a meter provider that periodically pushes to the OTLP HTTP endpoint.

    Args:
        resource: Service resource for metric identification
        export_interval_millis: How often accumulated metrics are pushed
    """
    endpoint = _otlp_endpoint()
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics"),
        export_interval_millis=export_interval_millis,
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))

    logger.info(f"Metric export enabled to {endpoint}")


def setup_observability(enable_exporters: bool = True) -> None:
    """Install tracer and meter providers and instrument httpx.

    Exporters are never enabled when ENVIRONMENT is "test". The httpx
    instrumentation is applied once per process.

    Args:
        enable_exporters: Push spans and metrics over OTLP
    """
    global _instrumented

    if os.getenv("ENVIRONMENT", "development") == "test":
        enable_exporters = False

    resource = get_service_resource()
    if enable_exporters:
        setup_tracing(resource)
        setup_metrics(resource)
    else:
        trace.set_tracer_provider(TracerProvider(resource=resource))
        metrics.set_meter_provider(MeterProvider(resource=resource))

    if not _instrumented:
        HTTPXClientInstrumentor().instrument()
        _instrumented = True

    logger.info(f"Observability ready (exporters {'on' if enable_exporters else 'off'})")


def configure_logging(log_level: str = "INFO") -> None:
    """Send JSON log lines to stderr.

    stdout is left to command output. httpx's per-request INFO lines are
    suppressed; request outcomes are logged by the API client instead.

    Args:
        log_level: Logging level, overridden by the LOG_LEVEL variable
    """
    level_str = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_str, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"levelname": "level"},
            timestamp=True,
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    logger.info(f"JSON logging configured at {level_str}")
