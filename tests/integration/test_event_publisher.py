"""
Integration tests for the EventBridge publisher.

EventBridge is mocked with moto; fault injection uses unittest.mock.
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from atm_events.events.event_publisher import EventPublisher
from atm_events.events.event_schemas import SAMPLE_TRANSACTIONS, build_sample_entries, to_eventbridge_entry


@pytest.mark.integration
class TestEventPublisher:
    """Integration tests for EventPublisher."""

    def test_publish_sample_batch(self, eventbridge_client):
        """Test the sample batch is accepted by EventBridge."""
        publisher = EventPublisher(client=eventbridge_client)

        result = publisher.publish_events(build_sample_entries("default"))

        assert result["FailedEntryCount"] == 0
        assert len(result["Entries"]) == 3
        assert all("EventId" in entry for entry in result["Entries"])

    def test_batch_sent_in_one_call(self, eventbridge_client):
        """Test the published batch size equals the prepared entries."""
        publisher = EventPublisher(client=eventbridge_client)
        entries = build_sample_entries("default")

        with patch.object(eventbridge_client, "put_events", wraps=eventbridge_client.put_events) as put_events:
            publisher.publish_events(entries)

        put_events.assert_called_once_with(Entries=entries)

    def test_large_batches_chunked(self, eventbridge_client):
        """Test more than ten entries are split across PutEvents calls."""
        publisher = EventPublisher(client=eventbridge_client)
        entries = [to_eventbridge_entry(SAMPLE_TRANSACTIONS[i % 3]) for i in range(25)]

        with patch.object(eventbridge_client, "put_events", wraps=eventbridge_client.put_events) as put_events:
            result = publisher.publish_events(entries)

        assert [len(call.kwargs["Entries"]) for call in put_events.call_args_list] == [10, 10, 5]
        assert len(result["Entries"]) == 25
        assert result["FailedEntryCount"] == 0

    def test_empty_batch_skips_api(self):
        client = MagicMock()

        result = EventPublisher(client=client).publish_events([])

        assert result == {"Entries": [], "FailedEntryCount": 0}
        client.put_events.assert_not_called()

    def test_failed_entries_reported(self):
        """Test rejected entries are counted and logged."""
        client = MagicMock()
        client.put_events.return_value = {
            "FailedEntryCount": 1,
            "Entries": [
                {"EventId": "1"},
                {"ErrorCode": "InternalFailure", "ErrorMessage": "try again"},
            ],
        }
        publisher = EventPublisher(client=client)

        with patch("atm_events.events.event_publisher.logger") as logger:
            result = publisher.publish_events(build_sample_entries()[:2])

        assert result["FailedEntryCount"] == 1
        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["extra"]["errors"] == ["InternalFailure"]

    def test_client_error_propagates_unchanged(self, client_error):
        """Test SDK errors reach the caller without wrapping."""
        error = client_error("AccessDeniedException", "not allowed")
        client = MagicMock()
        client.put_events.side_effect = error

        with pytest.raises(ClientError) as exc_info:
            EventPublisher(client=client).publish_events(build_sample_entries())

        assert exc_info.value is error
        client.put_events.assert_called_once()

    def test_default_client_region(self):
        """Test a regional client is created when none is supplied."""
        with patch("atm_events.events.event_publisher.boto3") as boto3:
            publisher = EventPublisher(event_bus_name="atm-bus", region_name="eu-west-1")

        boto3.client.assert_called_once_with("events", region_name="eu-west-1")
        assert publisher.event_bus_name == "atm-bus"
