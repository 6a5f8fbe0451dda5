#!/usr/bin/env python3
"""
Local invocation harness for the ATM Lambda handlers.

Emulates the Lambda context and an EventBridge delivery so the handlers can be
run from a workstation with spans exported to Honeycomb. Environment variables
are read from a .env file when present.

Usage:
    atm-local producer
    atm-local consumer [case1|approved|case2|ny|case3|unapproved|auto]
    atm-local routes
"""

import argparse
import json
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv

from atm_events.events.event_routing import ROUTES, UNAPPROVED_ROUTE, matching_routes, rule_event_pattern
from atm_events.events.event_schemas import build_sample_event
from atm_events.models.transaction import TransactionResult

HANDLER_ALIASES = {
    'case1': 'approved',
    'approved': 'approved',
    'case2': 'ny',
    'ny': 'ny',
    'case3': 'unapproved',
    'unapproved': 'unapproved',
    'auto': 'auto',
}

DEFAULT_DATASET = 'atm-events'


@dataclass
class LocalLambdaContext:
    """Stand-in for the context object the Lambda runtime passes to handlers."""

    function_name: str
    aws_request_id: str = '67890-request'
    function_version: str = 'local'
    memory_limit_in_mb: int = 128
    remaining_time_millis: int = 30000
    invoked_function_arn: str = field(default='')
    log_group_name: str = field(default='')
    log_stream_name: str = field(default='2021/01/01/[$LATEST]67890')

    def __post_init__(self):
        if not self.invoked_function_arn:
            self.invoked_function_arn = (
                f'arn:aws:lambda:us-east-1:123456789012:function:{self.function_name}'
            )
        if not self.log_group_name:
            self.log_group_name = f'/aws/lambda/{self.function_name}'

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_time_millis


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='atm-local',
        description='Invoke the ATM Lambda handlers locally with OpenTelemetry instrumentation',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('producer', help='Publish the sample transactions to EventBridge')

    consumer = subparsers.add_parser('consumer', help='Deliver a sample event to a consumer handler')
    consumer.add_argument(
        'handler',
        nargs='?',
        default='case1',
        help='case1/approved, case2/ny, case3/unapproved or auto (default: case1)',
    )

    subparsers.add_parser('routes', help='Print the EventBridge rule patterns')

    return parser


def _print_routes() -> int:
    for route in ROUTES:
        print(f"{route.name}: {rule_event_pattern(route)}")
    return 0


def _run(invocations: List[Callable[[], Any]]) -> int:
    from atm_events.handlers.utils.observability import flush_telemetry

    try:
        for invoke in invocations:
            result = invoke()
            print('Lambda executed successfully')
            print(json.dumps(result, indent=2, default=str))
    except Exception as error:
        print('Lambda execution failed', file=sys.stderr)
        print(repr(error), file=sys.stderr)
        return 1
    finally:
        flush_telemetry()

    print('Exiting after trace export')
    return 0


def _producer_invocations() -> List[Callable[[], Any]]:
    from atm_events.handlers import producer_handler

    context = LocalLambdaContext(function_name='atmProducer-local', aws_request_id='12345-request')
    return [lambda: producer_handler.lambda_handler({}, context)]


def _consumer_invocations(name: str) -> List[Callable[[], Any]]:
    from atm_events.handlers import consumer_handler

    context = LocalLambdaContext(function_name='atmConsumer-local')
    event: Dict[str, Any] = build_sample_event()

    if name == 'auto':
        route_names = [route.name for route in matching_routes(event)]
    else:
        route_names = [name]
        if name == UNAPPROVED_ROUTE.name:
            event['detail']['result'] = TransactionResult.DENIED.value

    print(f"Testing handlers: {', '.join(route_names)}")
    return [
        (lambda handler=consumer_handler.HANDLERS_BY_ROUTE[route_name]: handler(event, context))
        for route_name in route_names
    ]


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the local harness, returns the process exit code."""
    args = build_parser().parse_args(argv)

    # Read .env before the handler modules configure telemetry
    load_dotenv()

    if args.command == 'routes':
        return _print_routes()

    if not os.environ.get('HONEYCOMB_API_KEY'):
        print('Error: HONEYCOMB_API_KEY environment variable is required', file=sys.stderr)
        print('Please set it in your environment or create a .env file with this variable', file=sys.stderr)
        return 1

    if args.command == 'consumer':
        name = HANDLER_ALIASES.get(args.handler)
        if name is None:
            print(f'Unknown handler: {args.handler}', file=sys.stderr)
            print('Valid options: case1/approved, case2/ny, case3/unapproved, auto', file=sys.stderr)
            return 1

    print('Starting local test with OpenTelemetry instrumentation...')
    print(f"Sending traces to Honeycomb dataset: {os.environ.get('HONEYCOMB_DATASET', DEFAULT_DATASET)}")

    if args.command == 'producer':
        invocations = _producer_invocations()
    else:
        invocations = _consumer_invocations(name)

    return _run(invocations)


if __name__ == '__main__':
    sys.exit(main())
