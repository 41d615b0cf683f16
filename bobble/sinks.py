"""
Result sinks that receive the terminal outcome of a detection session.
"""
import logging
from typing import List

from .types import GestureEvent

logger = logging.getLogger(__name__)

_MESSAGES = {
    GestureEvent.NOD: "✅ User indicated YES (nod)",
    GestureEvent.SHAKE: "✅ User indicated NO (shake)",
    GestureEvent.TIMEOUT: "⏱️ Timeout reached, no gesture detected",
    GestureEvent.ERROR: "❌ Detection failed",
}


class LoggingResultSink:
    """Sink that logs the outcome and remembers it for the caller."""

    def __init__(self):
        self.result = None

    async def deliver(self, event: GestureEvent) -> None:
        self.result = event
        if event is GestureEvent.ERROR:
            logger.error(_MESSAGES[event])
        else:
            logger.info(_MESSAGES[event])


class MockResultSink:
    """Mock sink that records deliveries instead of acting on them."""

    def __init__(self):
        """Initialize the mock sink."""
        self.events: List[GestureEvent] = []

    async def deliver(self, event: GestureEvent) -> None:
        """Record a delivered event."""
        self.events.append(event)
        print(f"[MockResultSink] Result: {event.name} (call #{len(self.events)})")

    @property
    def delivery_count(self) -> int:
        return len(self.events)

    def reset(self) -> None:
        """Clear recorded events for testing."""
        self.events.clear()
