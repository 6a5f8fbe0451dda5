"""
Environment variable models for type-safe configuration.

This module defines Pydantic models for environment variables used by the
Lambda handlers, parsed with aws-lambda-env-modeler.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import BaseModel, get_environment_variables
from pydantic import Field

HONEYCOMB_TRACES_ENDPOINT = 'https://api.honeycomb.io/v1/traces'


class TelemetryEnvVars(BaseModel):
    """Environment variables shared by every traced handler."""

    # Honeycomb ingest key, spans are not exported without it
    HONEYCOMB_API_KEY: Annotated[Optional[str], Field(
        description='Honeycomb API key sent as x-honeycomb-team'
    )] = None

    HONEYCOMB_DATASET: Annotated[str, Field(
        min_length=1,
        description='Honeycomb dataset sent as x-honeycomb-dataset'
    )] = 'atm-events'

    HONEYCOMB_ENDPOINT: Annotated[str, Field(
        description='OTLP/HTTP traces endpoint'
    )] = HONEYCOMB_TRACES_ENDPOINT

    SERVICE_VERSION: Annotated[str, Field(
        description='Version reported as the service.version resource attribute'
    )] = '1.0.0'

    # Set by the Lambda runtime
    AWS_LAMBDA_FUNCTION_NAME: Annotated[Optional[str], Field(
        description='Name of the running Lambda function'
    )] = None

    FLUSH_TIMEOUT_MILLIS: Annotated[int, Field(
        ge=0,
        le=30000,
        description='Time allowed for exporting spans before the handler returns'
    )] = 5000

    @property
    def export_enabled(self) -> bool:
        """Check if spans can be exported to Honeycomb."""
        return bool(self.HONEYCOMB_API_KEY)


class ProducerEnvVars(TelemetryEnvVars):
    """Environment variables for the producer handler."""

    EVENT_BUS_NAME: Annotated[str, Field(
        min_length=1,
        description='EventBridge bus receiving the transaction events'
    )] = 'default'

    AWS_REGION: Annotated[str, Field(
        description='AWS region of the event bus'
    )] = 'us-east-1'


def get_telemetry_env_vars() -> TelemetryEnvVars:
    """Get validated telemetry environment variables."""
    return get_environment_variables(model=TelemetryEnvVars)


def get_producer_env_vars() -> ProducerEnvVars:
    """Get validated producer environment variables."""
    return get_environment_variables(model=ProducerEnvVars)
