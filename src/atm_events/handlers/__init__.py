"""
AWS Lambda Handlers Module.

This module contains the Lambda function handlers that serve as entry points
for the ATM event flow:

- producer_handler.lambda_handler: publishes transaction events to EventBridge
- consumer_handler.case1_handler: approved transactions
- consumer_handler.case2_handler: NY location transactions
- consumer_handler.case3_handler: unapproved transactions

The handlers use AWS Lambda Powertools for structured logging and metrics and
OpenTelemetry for distributed tracing exported to Honeycomb. Handler modules
configure telemetry on import, so they are not imported here.
"""

# Re-export handler utilities for convenience
from atm_events.handlers.utils.observability import logger, metrics

__all__ = [
    "logger",
    "metrics",
]
