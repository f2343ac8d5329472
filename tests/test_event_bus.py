"""
Tests for event bus functionality.
"""
from fee_proxy.core import EventBus


class TestEventBus:
    """Tests for EventBus pub/sub functionality."""

    def test_publish_subscribe(self):
        """Test pub/sub functionality."""
        bus = EventBus()
        received = []

        def handler(event):
            received.append(event)

        bus.subscribe("test_channel", handler)

        bus.publish("test_channel", "event_1")
        bus.publish("test_channel", "event_2")

        assert received == ["event_1", "event_2"]

    def test_multiple_subscribers(self):
        """Test multiple subscribers on same channel."""
        bus = EventBus()
        received_1 = []
        received_2 = []

        bus.subscribe("channel", received_1.append)
        bus.subscribe("channel", received_2.append)

        bus.publish("channel", "test_event")

        assert received_1 == ["test_event"]
        assert received_2 == ["test_event"]

    def test_channels_are_isolated(self):
        bus = EventBus()
        received = []
        bus.subscribe("a", received.append)

        bus.publish("b", "ignored")

        assert received == []

    def test_unsubscribe(self):
        """Test unsubscribe functionality."""
        bus = EventBus()
        received = []

        def handler(event):
            received.append(event)

        bus.subscribe("channel", handler)
        bus.publish("channel", "event_1")

        bus.unsubscribe("channel", handler)
        bus.publish("channel", "event_2")

        assert received == ["event_1"]

    def test_subscriber_error_isolation(self):
        """Test that one failing subscriber doesn't affect others."""
        bus = EventBus()
        received = []

        def bad_handler(event):
            raise RuntimeError("Intentional error")

        bus.subscribe("channel", bad_handler)
        bus.subscribe("channel", received.append)

        # Should not raise, and the good handler should still receive
        bus.publish("channel", "test")

        assert received == ["test"]
        stats = bus.get_stats("channel")
        assert stats.total_failed == 1
        assert stats.total_delivered == 1
        assert stats.failure_rate == 50

    def test_get_all_stats(self):
        """Test getting stats for all channels."""
        bus = EventBus()

        bus.subscribe("channel_1", lambda e: None)
        bus.publish("channel_2", "x")

        stats = bus.get_all_stats()

        assert stats["channel_1"].subscribers == 1
        assert stats["channel_2"].total_published == 1
        assert stats["channel_2"].failure_rate == 0
