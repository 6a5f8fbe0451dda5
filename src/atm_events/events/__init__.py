"""
EventBridge integration for ATM transaction events.

This module provides the entry format and static payload of the producer, the
publisher wrapping PutEvents, and the routing rules targeting the consumer.
"""

from .event_schemas import (
    ATM_EVENT_SOURCE,
    TRANSACTION_DETAIL_TYPE,
    SAMPLE_TRANSACTIONS,
    build_sample_entries,
    build_sample_event,
    to_eventbridge_entry,
)

from .event_publisher import EventPublisher

from .event_routing import (
    ROUTES,
    APPROVED_ROUTE,
    NY_LOCATION_ROUTE,
    UNAPPROVED_ROUTE,
    Route,
    matches,
    matching_routes,
    rule_event_pattern,
)

__all__ = [
    # Event Schemas
    'ATM_EVENT_SOURCE',
    'TRANSACTION_DETAIL_TYPE',
    'SAMPLE_TRANSACTIONS',
    'build_sample_entries',
    'build_sample_event',
    'to_eventbridge_entry',

    # Event Publisher
    'EventPublisher',

    # Event Routing
    'ROUTES',
    'APPROVED_ROUTE',
    'NY_LOCATION_ROUTE',
    'UNAPPROVED_ROUTE',
    'Route',
    'matches',
    'matching_routes',
    'rule_event_pattern',
]
