"""
ATM Producer Handler - publishes transaction events to EventBridge.

Each invocation publishes the static batch of ATM transactions to the
configured event bus. The handler span records the batch, and a child span
wraps the PutEvents call.
"""

from typing import Any, Dict

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from opentelemetry import trace
from opentelemetry.trace import SpanKind

from atm_events.events.event_publisher import EventPublisher
from atm_events.events.event_schemas import build_sample_entries
from atm_events.handlers.models.env_vars import get_producer_env_vars
from atm_events.handlers.utils.observability import configure_telemetry, flush_telemetry, logger, metrics
from atm_events.handlers.utils.tracing import entry_span_attributes, traced_span

SERVICE_NAME = 'atm-producer'

env_vars = get_producer_env_vars()

# Installed before the boto3 client is created so PutEvents calls are traced
configure_telemetry(SERVICE_NAME, env_vars, instrument_aws_sdk=True)
tracer = trace.get_tracer('atm-producer-tracer')

event_publisher = EventPublisher(
    event_bus_name=env_vars.EVENT_BUS_NAME,
    region_name=env_vars.AWS_REGION,
)


@metrics.log_metrics(capture_cold_start_metric=True)
@logger.inject_lambda_context
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Publish the ATM transaction batch to EventBridge.

    Args:
        event: Invocation payload, not used
        context: Lambda context object

    Returns:
        Combined PutEvents response
    """
    try:
        with traced_span(
            tracer,
            'atmProducer.handler',
            attributes={
                'lambda.name': context.function_name,
                'lambda.request_id': context.aws_request_id,
            },
            kind=SpanKind.SERVER,
        ) as span:
            entries = build_sample_entries(event_bus_name=event_publisher.event_bus_name)
            span.set_attributes(entry_span_attributes(entries))

            logger.info("Publishing transaction events", extra={"entries": entries})

            with traced_span(tracer, 'eventbridge.putEvents', kind=SpanKind.PRODUCER) as put_events_span:
                result = event_publisher.publish_events(entries)

                put_events_span.set_attribute('eventbridge.entries_count', len(result['Entries']))
                put_events_span.set_attribute('eventbridge.failed_entry_count', result['FailedEntryCount'])

                logger.info("PutEvents response", extra={"response": result})

            metrics.add_metric(name="EventsPublished", unit=MetricUnit.Count,
                               value=len(entries) - result['FailedEntryCount'])
            metrics.add_metric(name="FailedEntries", unit=MetricUnit.Count, value=result['FailedEntryCount'])

            return result
    finally:
        flush_telemetry(env_vars.FLUSH_TIMEOUT_MILLIS)
