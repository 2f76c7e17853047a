"""
Rating Consistency Trigger

Keeps each book's rating aggregate in step with its reviews.

The trigger subscribes to the review store's created/updated/deleted
events and asks the aggregation engine to recompute the affected book.
Events are published only after the review write has committed, so the
recompute always reads the committed review set.

Failure handling:
- NotFoundError: the book was deleted concurrently; logged and dropped.
- SQLAlchemyError: logged, the session is rolled back and the event is
  dropped. The review write that caused the event has already committed
  and stays; AggregationEngine.recompute() or scripts/recalculate_ratings.py
  repairs the aggregate later.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookreviews.exceptions import NotFoundError
from bookreviews.services.events import REVIEW_MUTATIONS, EventBus, ReviewEvent
from bookreviews.services.ratings import AggregationEngine
from bookreviews.services.reviews import ReviewStore

logger = logging.getLogger(__name__)


class ConsistencyTrigger:
    """Runs a rating recompute for every review mutation event."""

    def __init__(self, engine: AggregationEngine) -> None:
        self.engine = engine

    def attach(self, bus: EventBus) -> None:
        """Subscribe to all review mutation events on a bus."""
        for event_type in REVIEW_MUTATIONS:
            bus.subscribe(event_type, self.handle)

    def handle(self, event: ReviewEvent) -> None:
        try:
            self.engine.recompute(event.book_id)
        except NotFoundError:
            logger.warning(
                f"Skipping rating recompute after {event.type.value}: "
                f"book {event.book_id} no longer exists"
            )
        except SQLAlchemyError:
            logger.exception(
                f"Rating recompute failed for book {event.book_id} after {event.type.value}"
            )
            self.engine.db.rollback()


def create_review_store(db: Session) -> ReviewStore:
    """
    Build a ReviewStore whose mutations recompute book ratings.

    Wires store → event bus → consistency trigger → aggregation engine
    for one session.
    """
    bus = EventBus()
    store = ReviewStore(db, bus)
    ConsistencyTrigger(AggregationEngine(db, store)).attach(bus)
    return store
