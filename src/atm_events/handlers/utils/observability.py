"""
Centralized observability utilities for the ATM Lambda handlers.

Logging and metrics use AWS Lambda Powertools. Traces use the OpenTelemetry
SDK and are exported over OTLP/HTTP to Honeycomb.
"""

import signal
import sys
from typing import Dict, Optional

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.botocore import BotocoreInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from atm_events.handlers.models.env_vars import TelemetryEnvVars

# Metrics namespace for business KPIs
METRICS_NAMESPACE = 'AtmEvents'

LAMBDA_FUNCTION_NAME_ATTRIBUTE = 'aws.lambda.function_name'

# JSON output format, service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
logger: Logger = Logger()

# Namespace and service name can be set by environment variables:
# - POWERTOOLS_METRICS_NAMESPACE
# - POWERTOOLS_SERVICE_NAME
metrics = Metrics(namespace=METRICS_NAMESPACE)


def build_resource(service_name: str, env: TelemetryEnvVars) -> Resource:
    """Create the resource identifying this service in Honeycomb."""
    return Resource.create({
        SERVICE_NAME: service_name,
        SERVICE_VERSION: env.SERVICE_VERSION,
        LAMBDA_FUNCTION_NAME_ATTRIBUTE: env.AWS_LAMBDA_FUNCTION_NAME or f'{service_name}-local',
    })


def honeycomb_headers(env: TelemetryEnvVars) -> Dict[str, str]:
    return {
        'x-honeycomb-team': env.HONEYCOMB_API_KEY or '',
        'x-honeycomb-dataset': env.HONEYCOMB_DATASET,
    }


def build_span_exporter(env: TelemetryEnvVars) -> OTLPSpanExporter:
    return OTLPSpanExporter(endpoint=env.HONEYCOMB_ENDPOINT, headers=honeycomb_headers(env))


def configure_telemetry(
    service_name: str,
    env: TelemetryEnvVars,
    instrument_aws_sdk: bool = False,
) -> TracerProvider:
    """
    Install the OpenTelemetry tracer provider for this execution environment.

    Runs once per cold start. A provider installed earlier (a previous call,
    or a Lambda layer) is reused, and AWS SDK instrumentation is still applied
    to it when requested.

    Args:
        service_name: Value of the service.name resource attribute
        env: Telemetry environment variables
        instrument_aws_sdk: Also trace botocore calls

    Returns:
        The active SDK tracer provider
    """
    provider = trace.get_tracer_provider()
    if not isinstance(provider, TracerProvider):
        provider = _install_provider(service_name, env)

    if instrument_aws_sdk:
        instrument_botocore()

    return provider


def instrument_botocore() -> None:
    """Trace AWS SDK calls made through botocore."""
    instrumentor = BotocoreInstrumentor()
    if not instrumentor.is_instrumented_by_opentelemetry:
        instrumentor.instrument()


def _install_provider(service_name: str, env: TelemetryEnvVars) -> TracerProvider:
    provider = TracerProvider(resource=build_resource(service_name, env))

    if env.export_enabled:
        provider.add_span_processor(BatchSpanProcessor(build_span_exporter(env)))
    else:
        logger.warning(
            "HONEYCOMB_API_KEY is not set, spans will not be exported",
            extra={"service_name": service_name},
        )

    trace.set_tracer_provider(provider)
    signal.signal(signal.SIGTERM, _handle_sigterm)

    logger.info(
        "OpenTelemetry configured",
        extra={
            "service_name": service_name,
            "dataset": env.HONEYCOMB_DATASET,
            "export_enabled": env.export_enabled,
        },
    )
    return provider


def flush_telemetry(timeout_millis: int = 5000) -> bool:
    """Export pending spans before the Lambda environment is frozen."""
    provider = trace.get_tracer_provider()
    if not isinstance(provider, TracerProvider):
        return True

    flushed = provider.force_flush(timeout_millis=timeout_millis)
    if not flushed:
        logger.warning("Timed out flushing spans", extra={"timeout_millis": timeout_millis})
    return flushed


def shutdown_telemetry() -> None:
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()


def _handle_sigterm(signum: int, frame: Optional[object]) -> None:
    try:
        shutdown_telemetry()
        logger.info("Telemetry shut down successfully")
    except Exception:
        logger.exception("Error shutting down telemetry")
    finally:
        sys.exit(0)
