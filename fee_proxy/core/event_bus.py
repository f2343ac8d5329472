"""
Event Bus for the fee proxy.

Committed ledger events are published here by channel name.
Delivery is synchronous: publish() returns once every subscriber ran.
"""
from dataclasses import dataclass
from typing import Any, Callable
import logging

logger = logging.getLogger(__name__)


@dataclass
class ChannelStats:
    """Statistics for monitoring a channel."""
    subscribers: int
    total_published: int
    total_delivered: int
    total_failed: int

    @property
    def failure_rate(self) -> float:
        """Failed deliveries as a percentage of attempted deliveries."""
        attempted = self.total_delivered + self.total_failed
        return (self.total_failed / attempted) * 100 if attempted > 0 else 0


class EventBus:
    """
    Pub/sub hub for proxy events.

    A failing subscriber is logged and skipped; it never affects other
    subscribers nor the transaction that produced the event.
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callable[[Any], None]]] = {}
        self._published: dict[str, int] = {}
        self._delivered: dict[str, int] = {}
        self._failed: dict[str, int] = {}

    def publish(self, channel: str, event: Any) -> None:
        """Publish an event to all subscribers of a channel."""
        self._published[channel] = self._published.get(channel, 0) + 1
        for callback in list(self._subscribers.get(channel, [])):
            try:
                callback(event)
            except Exception as e:
                self._failed[channel] = self._failed.get(channel, 0) + 1
                logger.error(f"Subscriber error on channel {channel}: {e}")
            else:
                self._delivered[channel] = self._delivered.get(channel, 0) + 1

    def subscribe(self, channel: str, callback: Callable[[Any], None]) -> None:
        """Subscribe to a channel."""
        if channel not in self._subscribers:
            self._subscribers[channel] = []
        self._subscribers[channel].append(callback)

    def unsubscribe(self, channel: str, callback: Callable[[Any], None]) -> None:
        """Unsubscribe from a channel."""
        if channel in self._subscribers:
            self._subscribers[channel] = [
                cb for cb in self._subscribers[channel] if cb != callback
            ]

    def get_stats(self, channel: str) -> ChannelStats:
        return ChannelStats(
            subscribers=len(self._subscribers.get(channel, [])),
            total_published=self._published.get(channel, 0),
            total_delivered=self._delivered.get(channel, 0),
            total_failed=self._failed.get(channel, 0),
        )

    def get_all_stats(self) -> dict[str, ChannelStats]:
        """Get statistics for every channel seen so far."""
        channels = set(self._subscribers) | set(self._published)
        return {name: self.get_stats(name) for name in sorted(channels)}
