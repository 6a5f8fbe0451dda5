"""
Output models returned by the consumer handlers.
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


class TransactionCategory(str, Enum):
    """Category label reported by each consumer handler."""

    APPROVED = 'approved'
    NY_LOCATION = 'ny-location'
    UNAPPROVED = 'unapproved'


class ConsumerSummary(BaseModel):
    """Summary returned to the Lambda runtime after consuming an event."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    processed: Annotated[bool, Field(
        description='Whether the event was processed'
    )] = True

    transaction_count: Annotated[int, Field(
        ge=0,
        alias='transactionCount',
        description='Number of transactions found in the input',
        examples=[1, 3]
    )]

    type: Annotated[TransactionCategory, Field(
        description='Category of transactions handled',
        examples=['approved', 'ny-location', 'unapproved']
    )]

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
