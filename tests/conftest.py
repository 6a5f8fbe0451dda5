"""
Pytest configuration and shared fixtures for the ATM event handlers.

This module provides common test fixtures and configuration used across
unit and integration tests.
"""

import json
import os
from typing import Any, Dict

import boto3
import pytest
from moto import mock_aws
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

# Handler modules read their configuration at import time, during collection
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "EVENT_BUS_NAME": "default",
    "HONEYCOMB_DATASET": "test-atm-events",
    "FLUSH_TIMEOUT_MILLIS": "1000",
    "POWERTOOLS_SERVICE_NAME": "test-atm-events",
    "POWERTOOLS_METRICS_NAMESPACE": "TestAtmEvents",
    "POWERTOOLS_LOG_LEVEL": "DEBUG",
})
os.environ.pop("HONEYCOMB_API_KEY", None)

# Installed before any handler module so configure_telemetry reuses it
SPAN_EXPORTER = InMemorySpanExporter()
_provider = TracerProvider()
_provider.add_span_processor(SimpleSpanProcessor(SPAN_EXPORTER))
trace.set_tracer_provider(_provider)

from atm_events.events.event_schemas import build_sample_event  # noqa: E402
from atm_events.local_invoke import LocalLambdaContext  # noqa: E402


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory exporter receiving every span ended during the test."""
    SPAN_EXPORTER.clear()
    yield SPAN_EXPORTER
    SPAN_EXPORTER.clear()


@pytest.fixture
def finished_spans(span_exporter):
    """Return finished spans keyed by name."""
    def get() -> Dict[str, Any]:
        return {span.name: span for span in span_exporter.get_finished_spans()}

    return get


@pytest.fixture
def lambda_context() -> LocalLambdaContext:
    """Create a Lambda context for testing."""
    return LocalLambdaContext(
        function_name="test-atm-function",
        aws_request_id="test-request-id-123",
    )


@pytest.fixture
def approved_event() -> Dict[str, Any]:
    """EventBridge delivery of an approved NY transaction."""
    return build_sample_event(result="approved")


@pytest.fixture
def denied_event() -> Dict[str, Any]:
    """EventBridge delivery of a denied NY transaction."""
    return build_sample_event(result="denied")


@pytest.fixture
def sqs_batch_event(approved_event) -> Dict[str, Any]:
    """Batch delivery wrapping three EventBridge events in record bodies."""
    return {
        "Records": [
            {"messageId": f"msg-{i}", "body": json.dumps(approved_event)}
            for i in range(3)
        ]
    }


@pytest.fixture
def eventbridge_client():
    """EventBridge client backed by moto."""
    with mock_aws():
        yield boto3.client("events", region_name="us-east-1")


@pytest.fixture
def client_error():
    """Build botocore ClientErrors for testing error handling."""
    from botocore.exceptions import ClientError

    def create_error(error_code: str, message: str = "Test error", operation: str = "PutEvents"):
        return ClientError(
            error_response={
                "Error": {
                    "Code": error_code,
                    "Message": message,
                }
            },
            operation_name=operation,
        )

    return create_error


# Pytest configuration
def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
