"""
Routing rules for the ATM consumer.

EventBridge evaluates these rules in the cloud and invokes the matching
consumer handler. The same patterns are kept here as data so the deployment
and the local harness share one definition, together with an evaluator for
the subset of the EventBridge pattern syntax they use.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from atm_events.events.event_schemas import ATM_EVENT_SOURCE
from atm_events.models.output import TransactionCategory


@dataclass(frozen=True)
class Route:
    """An EventBridge rule and the consumer handler it targets."""

    name: str
    category: TransactionCategory
    span_name: str
    pattern: Dict[str, Any]


APPROVED_ROUTE = Route(
    name="approved",
    category=TransactionCategory.APPROVED,
    span_name="atmConsumer.approvedTransactions",
    pattern={
        "source": [ATM_EVENT_SOURCE],
        "detail": {"result": ["approved"]},
    },
)

NY_LOCATION_ROUTE = Route(
    name="ny",
    category=TransactionCategory.NY_LOCATION,
    span_name="atmConsumer.NYTransactions",
    pattern={
        "source": [ATM_EVENT_SOURCE],
        "detail": {"location": [{"prefix": "NY-"}]},
    },
)

UNAPPROVED_ROUTE = Route(
    name="unapproved",
    category=TransactionCategory.UNAPPROVED,
    span_name="atmConsumer.unapprovedTransactions",
    pattern={
        "source": [ATM_EVENT_SOURCE],
        "detail": {"result": [{"anything-but": "approved"}]},
    },
)

ROUTES: List[Route] = [APPROVED_ROUTE, NY_LOCATION_ROUTE, UNAPPROVED_ROUTE]

_MISSING = object()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _numeric_matches(conditions: List[Any], value: Any) -> bool:
    if not _is_number(value):
        return False
    operators = {
        "<": lambda a, b: a < b,
        "<=": lambda a, b: a <= b,
        "=": lambda a, b: a == b,
        ">": lambda a, b: a > b,
        ">=": lambda a, b: a >= b,
    }
    for i in range(0, len(conditions), 2):
        op, operand = conditions[i], conditions[i + 1]
        if op not in operators:
            raise ValueError(f"Unsupported numeric operator: {op}")
        if not operators[op](value, operand):
            return False
    return True


def _condition_matches(condition: Any, value: Any) -> bool:
    """Match a single pattern element against a single (present) value."""
    if not isinstance(condition, Mapping):
        return condition == value

    if "exists" in condition:
        return condition["exists"] is (value is not _MISSING)
    if value is _MISSING:
        return False
    if "prefix" in condition:
        return isinstance(value, str) and value.startswith(condition["prefix"])
    if "anything-but" in condition:
        excluded = condition["anything-but"]
        if isinstance(excluded, Mapping):
            if "prefix" in excluded:
                return not (isinstance(value, str) and value.startswith(excluded["prefix"]))
            raise ValueError(f"Unsupported anything-but pattern: {excluded}")
        if not isinstance(excluded, list):
            excluded = [excluded]
        return value not in excluded
    if "numeric" in condition:
        return _numeric_matches(condition["numeric"], value)

    raise ValueError(f"Unsupported pattern condition: {condition}")


def _field_matches(conditions: List[Any], value: Any) -> bool:
    # Array values match when any element matches any condition
    values = value if isinstance(value, list) else [value]
    for condition in conditions:
        if isinstance(condition, Mapping) and "exists" in condition:
            if _condition_matches(condition, value):
                return True
            continue
        if value is _MISSING:
            continue
        if any(_condition_matches(condition, v) for v in values):
            return True
    return False


def matches(pattern: Mapping[str, Any], event: Mapping[str, Any]) -> bool:
    """
    Evaluate an EventBridge event pattern against an event.

    Supports exact values, ``prefix``, ``anything-but`` (scalar, list or
    prefix), ``exists`` and ``numeric`` conditions, and nested objects.

    Args:
        pattern: EventBridge event pattern
        event: Event (or nested object) to test

    Returns:
        True when every field of the pattern matches
    """
    for key, expected in pattern.items():
        value = event.get(key, _MISSING) if isinstance(event, Mapping) else _MISSING

        if isinstance(expected, Mapping):
            if not isinstance(value, Mapping) or not matches(expected, value):
                return False
        elif isinstance(expected, list):
            if not _field_matches(expected, value):
                return False
        else:
            raise ValueError(f"Pattern values must be lists or objects, got {expected!r} for {key}")

    return True


def matching_routes(event: Mapping[str, Any]) -> List[Route]:
    """Return the routes whose rule matches the event, in declaration order."""
    return [route for route in ROUTES if matches(route.pattern, event)]


def rule_event_pattern(route: Route) -> str:
    """Render a route's pattern as the JSON string expected by PutRule."""
    return json.dumps(route.pattern)
