"""
ATM Events - traced EventBridge producer and consumer Lambda functions.

This package is split into layers, with the Lambda entry points kept apart
from the event and model code they share:

- handlers: Lambda entry points and observability utilities
- events: EventBridge entries, publishing and routing rules
- models: Transaction and response models

Every handler is instrumented with OpenTelemetry and exports spans to
Honeycomb over OTLP/HTTP.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
]
