"""
Transaction model carried in the EventBridge event detail.

The ATM application publishes one flat transaction record per event. Field
names on the wire are camelCase; the model exposes snake_case attributes and
accepts either form.
"""

from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TransactionResult(str, Enum):
    """Outcome reported by the ATM for a transaction."""

    APPROVED = 'approved'
    DENIED = 'denied'


class Transaction(BaseModel):
    """A single ATM transaction."""

    model_config = ConfigDict(populate_by_name=True, extra='allow')

    transaction_id: Annotated[str, Field(
        alias='transactionId',
        description='Unique identifier for the transaction',
        examples=['123456']
    )]

    action: Annotated[str, Field(
        description='Action performed at the ATM',
        examples=['withdrawal']
    )]

    location: Annotated[str, Field(
        description='ATM location code',
        examples=['NY-NYC-001', 'MA-BOS-01']
    )]

    amount: Annotated[Union[int, float], Field(
        description='Monetary amount of the transaction',
        examples=[300]
    )]

    result: Annotated[str, Field(
        description='Transaction result code',
        examples=['approved', 'denied']
    )]

    card_present: Annotated[Optional[bool], Field(
        alias='cardPresent',
        description='Whether the card was physically present'
    )] = None

    partner_bank: Annotated[Optional[str], Field(
        alias='partnerBank',
        description='Partner bank that owns the ATM'
    )] = None

    remaining_funds: Annotated[Optional[float], Field(
        alias='remainingFunds',
        description='Account balance after the transaction'
    )] = None

    @property
    def is_approved(self) -> bool:
        return self.result == TransactionResult.APPROVED.value

    def to_detail(self) -> dict[str, Any]:
        """Serialize to the camelCase EventBridge detail shape."""
        return self.model_dump(by_alias=True, exclude_none=True)
