"""
ATM Consumer Handlers - targets of the EventBridge routing rules.

EventBridge evaluates the rules in atm_events.events.event_routing and invokes
one handler per matching rule:

- case1_handler: approved transactions
- case2_handler: transactions at New York locations
- case3_handler: unapproved transactions
"""

import json
from typing import Any, Dict, List

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from opentelemetry import trace

from atm_events.events.event_routing import APPROVED_ROUTE, NY_LOCATION_ROUTE, UNAPPROVED_ROUTE, Route
from atm_events.handlers.models.env_vars import get_telemetry_env_vars
from atm_events.handlers.utils.observability import configure_telemetry, flush_telemetry, logger, metrics
from atm_events.handlers.utils.tracing import process_event_with_tracing
from atm_events.models.output import ConsumerSummary

SERVICE_NAME = 'atm-consumer'

env_vars = get_telemetry_env_vars()
configure_telemetry(SERVICE_NAME, env_vars)
tracer = trace.get_tracer('atm-consumer-tracer')

LOG_TITLES = {
    APPROVED_ROUTE.name: "Approved transactions",
    NY_LOCATION_ROUTE.name: "NY location transactions",
    UNAPPROVED_ROUTE.name: "Unapproved transactions",
}


def extract_transactions(event: Dict[str, Any]) -> List[Any]:
    """
    List the transactions carried by an invocation payload.

    Batched deliveries carry a ``Records`` list whose JSON ``body`` holds the
    event; records without a body are taken as-is. A bare EventBridge event is
    a single transaction.
    """
    records = event.get('Records')
    if isinstance(records, list):
        return [
            json.loads(record['body']) if isinstance(record, dict) and record.get('body') else record
            for record in records
        ]
    return [event]


def _summarize(route: Route, event: Dict[str, Any]) -> Dict[str, Any]:
    logger.info(LOG_TITLES[route.name], extra={"event": event})

    transactions = extract_transactions(event)
    metrics.add_metric(name="TransactionsProcessed", unit=MetricUnit.Count, value=len(transactions))

    return ConsumerSummary(
        transaction_count=len(transactions),
        type=route.category,
    ).to_response()


def _handle(route: Route, event: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return process_event_with_tracing(
            tracer, event, route.span_name, lambda e: _summarize(route, e)
        )
    finally:
        flush_telemetry(env_vars.FLUSH_TIMEOUT_MILLIS)


@metrics.log_metrics(capture_cold_start_metric=True)
@logger.inject_lambda_context(correlation_id_path=correlation_paths.EVENT_BRIDGE)
def case1_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """Process approved transactions."""
    return _handle(APPROVED_ROUTE, event)


@metrics.log_metrics(capture_cold_start_metric=True)
@logger.inject_lambda_context(correlation_id_path=correlation_paths.EVENT_BRIDGE)
def case2_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """Process NY location transactions."""
    return _handle(NY_LOCATION_ROUTE, event)


@metrics.log_metrics(capture_cold_start_metric=True)
@logger.inject_lambda_context(correlation_id_path=correlation_paths.EVENT_BRIDGE)
def case3_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """Process unapproved transactions."""
    return _handle(UNAPPROVED_ROUTE, event)


HANDLERS_BY_ROUTE = {
    APPROVED_ROUTE.name: case1_handler,
    NY_LOCATION_ROUTE.name: case2_handler,
    UNAPPROVED_ROUTE.name: case3_handler,
}
