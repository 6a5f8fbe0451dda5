"""
Data models for ATM transaction events.
"""

from atm_events.models.output import ConsumerSummary, TransactionCategory
from atm_events.models.transaction import Transaction, TransactionResult

__all__ = [
    "ConsumerSummary",
    "Transaction",
    "TransactionCategory",
    "TransactionResult",
]
