"""
EventBridge Publisher for ATM transaction events.

Thin wrapper around the boto3 EventBridge client. Entries are sent as-is,
chunked to the PutEvents limit; retries and redrive belong to the Lambda
runtime, so client errors propagate unchanged.
"""

from typing import Any, Dict, List, Optional

import boto3

from atm_events.events.event_schemas import MAX_ENTRIES_PER_PUT
from atm_events.handlers.utils.observability import logger


class EventPublisher:
    """Publishes prepared PutEvents entries to an EventBridge bus."""

    def __init__(
        self,
        event_bus_name: str = "default",
        region_name: str = "us-east-1",
        client: Optional[Any] = None,
    ):
        """
        Initialize EventBridge publisher.

        Args:
            event_bus_name: Name of the EventBridge bus
            region_name: AWS region
            client: Preconfigured boto3 EventBridge client
        """
        self.event_bus_name = event_bus_name
        self.eventbridge = client or boto3.client('events', region_name=region_name)

    def publish_events(self, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Publish entries to EventBridge.

        Args:
            entries: PutEvents entries, published in order

        Returns:
            Combined PutEvents response with ``Entries`` and ``FailedEntryCount``
        """
        combined: Dict[str, Any] = {"Entries": [], "FailedEntryCount": 0}

        for batch in self._create_batches(entries):
            response = self.eventbridge.put_events(Entries=batch)
            combined["Entries"].extend(response.get("Entries", []))
            combined["FailedEntryCount"] += response.get("FailedEntryCount", 0)

        if combined["FailedEntryCount"] > 0:
            logger.warning(
                "Some entries were rejected by EventBridge",
                extra={
                    "event_bus_name": self.event_bus_name,
                    "failed_entry_count": combined["FailedEntryCount"],
                    "errors": [
                        entry.get("ErrorCode")
                        for entry in combined["Entries"]
                        if "ErrorCode" in entry
                    ],
                },
            )

        return combined

    def _create_batches(self, entries: List[Dict[str, Any]]) -> List[List[Dict[str, Any]]]:
        """Create batches from entries list."""
        return [
            entries[i:i + MAX_ENTRIES_PER_PUT]
            for i in range(0, len(entries), MAX_ENTRIES_PER_PUT)
        ]
