"""
Ratings Service

Maintains the denormalized rating fields on the Book model:
- average_rating: The mean of all review ratings (0 when there are none)
- review_count: Total number of reviews

The aggregate is always recomputed from the book's full current review
set rather than adjusted by a delta, so racing recomputes converge on the
correct value and re-running a recompute is harmless. The engine is the
only writer of these two columns and never writes reviews.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from bookreviews.exceptions import NotFoundError
from bookreviews.models import Book, Review

logger = logging.getLogger(__name__)

RATING_VALUES = (1, 2, 3, 4, 5)


class ReviewReader(Protocol):
    """The read side of the review store the engine depends on."""

    def find_by_book(self, book_id: int) -> list[Review]: ...


@dataclass(frozen=True)
class RatingAggregate:
    """A book's derived rating fields."""

    average_rating: float
    review_count: int


def aggregate_ratings(ratings: Iterable[int]) -> RatingAggregate:
    """
    Compute the mean and count of a set of ratings.

    Ratings are summed as integers before the single division, so the
    result does not depend on the order the ratings were read in.

    Args:
        ratings: Star ratings (1-5)

    Returns:
        RatingAggregate with average_rating 0.0 for an empty set
    """
    values = list(ratings)
    count = len(values)
    if count == 0:
        return RatingAggregate(average_rating=0.0, review_count=0)
    return RatingAggregate(average_rating=sum(values) / count, review_count=count)


def rating_distribution(ratings: Iterable[int]) -> dict[int, int]:
    """Count how many times each star value (1-5) occurs."""
    distribution = dict.fromkeys(RATING_VALUES, 0)
    for rating in ratings:
        distribution[rating] += 1
    return distribution


class AggregationEngine:
    """
    Recomputes and persists a book's rating aggregate.

    Args:
        db: Database session
        reviews: Anything with find_by_book(), normally the ReviewStore
    """

    def __init__(self, db: Session, reviews: ReviewReader) -> None:
        self.db = db
        self.reviews = reviews

    def recompute(self, book_id: int) -> RatingAggregate:
        """
        Recalculate a book's aggregate from its current reviews and store it.

        Both fields are written by one UPDATE statement and committed.

        Args:
            book_id: ID of the book to update

        Returns:
            The aggregate that was stored

        Raises:
            NotFoundError: If the book does not exist
        """
        aggregate = aggregate_ratings(
            review.rating for review in self.reviews.find_by_book(book_id)
        )

        stmt = (
            update(Book)
            .where(Book.id == book_id)
            .values(
                average_rating=aggregate.average_rating,
                review_count=aggregate.review_count,
            )
        )
        result = self.db.execute(stmt)
        if result.rowcount == 0:
            # No row matched: nothing to roll back, loaded objects stay loaded
            raise NotFoundError(f"Book with id {book_id} not found")

        self.db.commit()
        logger.debug(
            f"Recomputed rating for book {book_id}: "
            f"average={aggregate.average_rating} count={aggregate.review_count}"
        )
        return aggregate

    def recompute_all(self) -> int:
        """
        Recalculate rating aggregations for all books.

        Useful for data migrations or repairing aggregates after a missed
        recompute. Books deleted while this runs are skipped.

        Returns:
            Number of books updated
        """
        book_ids = self.db.execute(select(Book.id).order_by(Book.id)).scalars().all()

        updated = 0
        for book_id in book_ids:
            try:
                self.recompute(book_id)
            except NotFoundError:
                logger.info(f"Book {book_id} deleted during full recompute, skipping")
                continue
            updated += 1

        logger.info(f"Recomputed ratings for {updated} books")
        return updated
