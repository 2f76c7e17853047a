"""
Review Event Bus

In-process publish/subscribe for review mutations.

The review store publishes an event after each committed create, update
or delete. Subscribers (currently the consistency trigger that recomputes
book ratings) register per event type. Dispatch is synchronous: publish()
returns after every handler has run, in subscription order.

Usage:
    from bookreviews.services.events import EventBus, EventType, ReviewEvent

    bus = EventBus()
    bus.subscribe(EventType.REVIEW_CREATED, lambda event: print(event.book_id))
    bus.publish(ReviewEvent(type=EventType.REVIEW_CREATED, book_id=1, review_id=7, author_id=3))
"""

import json
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Event Types
# =============================================================================


class EventType(StrEnum):
    """Review mutations that can change a book's rating aggregate."""

    REVIEW_CREATED = "review.created"
    REVIEW_UPDATED = "review.updated"
    REVIEW_DELETED = "review.deleted"


REVIEW_MUTATIONS = (
    EventType.REVIEW_CREATED,
    EventType.REVIEW_UPDATED,
    EventType.REVIEW_DELETED,
)


@dataclass
class ReviewEvent:
    """
    A committed review mutation.

    Attributes:
        type: The event type
        book_id: Book whose review set changed
        review_id: The review that was written or removed
        author_id: Author of the review
        timestamp: When the event was created
    """

    type: EventType
    book_id: int
    review_id: int
    author_id: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "book_id": self.book_id,
            "review_id": self.review_id,
            "author_id": self.author_id,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert event to JSON string."""
        return json.dumps(self.to_dict())


EventHandler = Callable[[ReviewEvent], None]


# =============================================================================
# Event Bus
# =============================================================================


class EventBus:
    """
    Synchronous dispatcher from event types to handlers.

    Handler exceptions propagate to the publisher; handlers that must not
    fail the publishing request catch their own errors.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Register a handler for one event type."""
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_type: EventType) -> list[EventHandler]:
        """Handlers currently subscribed to an event type."""
        return list(self._handlers.get(event_type, []))

    def publish(self, event: ReviewEvent) -> int:
        """
        Deliver an event to every handler subscribed to its type.

        Args:
            event: The event to publish

        Returns:
            Number of handlers the event was delivered to
        """
        handlers = self.handlers_for(event.type)
        for handler in handlers:
            handler(event)
        logger.debug(f"Published {event.type.value} for book {event.book_id} to {len(handlers)} handlers")
        return len(handlers)
