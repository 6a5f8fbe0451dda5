"""
Span helpers wrapping handler work in OpenTelemetry spans.

Every span ends with status OK when the wrapped work returns and ERROR, with
the exception recorded, when it raises. Exceptions are always re-raised
unchanged so the Lambda runtime applies its retry policy.
"""

import json
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, TypeVar

from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer
from opentelemetry.util.types import AttributeValue

T = TypeVar('T')

# detail field -> span attribute
TRANSACTION_ATTRIBUTES = {
    'transactionId': 'transaction.id',
    'action': 'transaction.action',
    'location': 'transaction.location',
    'amount': 'transaction.amount',
    'result': 'transaction.result',
}

# detail field -> per-entry span attribute suffix
ENTRY_DETAIL_ATTRIBUTES = ('action', 'location', 'amount', 'result', 'transactionId')


def _clean(attributes: Mapping[str, Any]) -> Dict[str, AttributeValue]:
    # OpenTelemetry rejects None attribute values
    return {key: value for key, value in attributes.items() if value is not None}


@contextmanager
def traced_span(
    tracer: Tracer,
    name: str,
    attributes: Optional[Mapping[str, Any]] = None,
    kind: SpanKind = SpanKind.INTERNAL,
) -> Iterator[Span]:
    """
    Start a span as the current span and close it with the outcome of the block.

    Args:
        tracer: Tracer creating the span
        name: Span name
        attributes: Initial span attributes, None values are dropped
        kind: Span kind

    Yields:
        The active span
    """
    with tracer.start_as_current_span(
        name,
        kind=kind,
        attributes=_clean(attributes or {}),
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as error:
            span.set_status(Status(StatusCode.ERROR, str(error)))
            span.record_exception(error)
            raise
        span.set_status(Status(StatusCode.OK))


def event_span_attributes(event: Mapping[str, Any]) -> Dict[str, AttributeValue]:
    """Collect envelope and transaction attributes from an EventBridge event."""
    detail = event.get('detail') if isinstance(event, Mapping) else None
    if not isinstance(detail, Mapping):
        return {}

    attributes: Dict[str, Any] = {
        'eventbridge.source': event.get('source'),
        'eventbridge.detail_type': event.get('detail-type'),
        'eventbridge.id': event.get('id'),
        'eventbridge.time': event.get('time'),
    }
    for field, attribute in TRANSACTION_ATTRIBUTES.items():
        attributes[attribute] = detail.get(field)
    return _clean(attributes)


def entry_span_attributes(entries: List[Dict[str, Any]]) -> Dict[str, AttributeValue]:
    """Collect producer attributes describing each PutEvents entry."""
    attributes: Dict[str, Any] = {'events.count': len(entries)}
    for index, entry in enumerate(entries):
        attributes[f'event.{index}.source'] = entry.get('Source')
        attributes[f'event.{index}.type'] = entry.get('DetailType')
        detail = json.loads(entry.get('Detail') or '{}')
        for field in ENTRY_DETAIL_ATTRIBUTES:
            attributes[f'event.{index}.{field}'] = detail.get(field)
    return _clean(attributes)


def process_event_with_tracing(
    tracer: Tracer,
    event: Dict[str, Any],
    span_name: str,
    handler: Callable[[Dict[str, Any]], T],
) -> T:
    """
    Run a handler callback inside a span annotated from the incoming event.

    Args:
        tracer: Tracer creating the span
        event: EventBridge event passed to the callback
        span_name: Span name
        handler: Callback receiving the event

    Returns:
        The callback's return value
    """
    with traced_span(tracer, span_name, attributes=event_span_attributes(event)):
        return handler(event)
