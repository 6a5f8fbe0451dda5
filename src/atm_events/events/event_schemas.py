"""
Event Schemas for the ATM EventBridge integration.

This module defines the envelope constants, the static transaction payload
published by the producer, and helpers converting transactions into
EventBridge PutEvents entries and delivery envelopes.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from atm_events.models.transaction import Transaction, TransactionResult

ATM_EVENT_SOURCE = "custom.myATMapp"
TRANSACTION_DETAIL_TYPE = "transaction"

# EventBridge PutEvents accepts at most 10 entries per call
MAX_ENTRIES_PER_PUT = 10

SAMPLE_TRANSACTIONS: List[Transaction] = [
    Transaction(
        action="withdrawal",
        location="MA-BOS-01",
        amount=300,
        result=TransactionResult.APPROVED.value,
        transaction_id="123456",
        card_present=True,
        partner_bank="Example Bank",
        remaining_funds=722.34,
    ),
    Transaction(
        action="withdrawal",
        location="NY-NYC-001",
        amount=20,
        result=TransactionResult.APPROVED.value,
        transaction_id="123457",
        card_present=True,
        partner_bank="Example Bank",
        remaining_funds=212.52,
    ),
    Transaction(
        action="withdrawal",
        location="NY-NYC-002",
        amount=60,
        result=TransactionResult.DENIED.value,
        transaction_id="123458",
        card_present=True,
        remaining_funds=5.77,
    ),
]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_eventbridge_entry(
    transaction: Transaction,
    event_bus_name: str = "default",
    time: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Convert a transaction to the EventBridge PutEvents entry format."""
    return {
        "Source": ATM_EVENT_SOURCE,
        "EventBusName": event_bus_name,
        "DetailType": TRANSACTION_DETAIL_TYPE,
        "Time": time or _utc_now(),
        "Detail": json.dumps(transaction.to_detail()),
        "Resources": [],
    }


def build_sample_entries(
    event_bus_name: str = "default",
    time: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Build the static batch of entries published by the producer."""
    time = time or _utc_now()
    return [
        to_eventbridge_entry(transaction, event_bus_name, time)
        for transaction in SAMPLE_TRANSACTIONS
    ]


def build_sample_event(
    result: str = TransactionResult.APPROVED.value,
    time: Optional[datetime] = None,
    account: str = "123456789012",
    region: str = "us-east-1",
) -> Dict[str, Any]:
    """
    Build an EventBridge delivery envelope as a rule target receives it.

    Args:
        result: Transaction result to place in the detail
        time: Event time, defaults to now
        account: AWS account id of the envelope
        region: AWS region of the envelope

    Returns:
        EventBridge event dictionary with a transaction detail
    """
    transaction = Transaction(
        action="withdrawal",
        location="NY-NYC-001",
        amount=300,
        result=result,
        transaction_id="123456",
        card_present=True,
        partner_bank="Example Bank",
        remaining_funds=722.34,
    )
    return {
        "version": "0",
        "id": str(uuid4()),
        "detail-type": TRANSACTION_DETAIL_TYPE,
        "source": ATM_EVENT_SOURCE,
        "account": account,
        "time": (time or _utc_now()).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "region": region,
        "resources": [],
        "detail": transaction.to_detail(),
    }
