"""
Review Store

Owns review records and their write path.

Business Rules:
- One review per user per book. The reviews table's unique constraint
  decides; the insert runs inside a SAVEPOINT so a violation leaves the
  session usable and is reported as DuplicateReviewError.
- Rating must be an integer 1-5 and the comment is length-bounded.
  Violations raise ValidationError before anything is written.
- book_id and user_id never change after creation.

Every successful create/update/delete is committed first and then
published on the EventBus, so subscribers always see the committed
review set.
"""

import logging
from typing import Any, NoReturn

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookreviews.config import get_settings
from bookreviews.exceptions import DuplicateReviewError, NotFoundError, ValidationError
from bookreviews.models import Book, Review
from bookreviews.services.events import EventBus, EventType, ReviewEvent

logger = logging.getLogger(__name__)
settings = get_settings()

MIN_RATING = 1
MAX_RATING = 5


class _Unset:
    """Marker for a field the caller did not pass."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def validate_rating(rating: Any) -> int:
    """Reject anything that is not an integer star rating in 1-5."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer from 1 to 5")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return rating


def validate_comment(comment: Any) -> str | None:
    """Allow None or a string no longer than the configured maximum."""
    if comment is None:
        return None
    if not isinstance(comment, str):
        raise ValidationError("Review text must be a string")
    if len(comment) > settings.review_text_max_length:
        raise ValidationError(
            f"Review text must be at most {settings.review_text_max_length} characters"
        )
    return comment


class ReviewStore:
    """
    Persistence and invariants for Review records.

    Args:
        db: Database session; the store commits its own writes
        events: Bus that receives review.created/updated/deleted
    """

    def __init__(self, db: Session, events: EventBus | None = None) -> None:
        self.db = db
        self.events = events if events is not None else EventBus()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def get_review(self, review_id: int) -> Review:
        """
        Get a review by ID with its author loaded.

        Raises:
            NotFoundError: If the review does not exist
        """
        stmt = (
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.id == review_id)
        )
        review = self.db.execute(stmt).scalar_one_or_none()
        if review is None:
            raise NotFoundError(f"Review with id {review_id} not found")
        return review

    def find_by_book(self, book_id: int) -> list[Review]:
        """
        All reviews for a book, read fresh from the database.

        The order is unspecified.
        """
        stmt = (
            select(Review)
            .where(Review.book_id == book_id)
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_for_book(self, book_id: int, offset: int, limit: int) -> tuple[list[Review], int]:
        """
        A newest-first page of a book's reviews plus the total count.

        Returns:
            (reviews on this page, total reviews for the book)
        """
        count_stmt = select(func.count()).select_from(Review).where(Review.book_id == book_id)
        total = self.db.execute(count_stmt).scalar() or 0

        stmt = (
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.book_id == book_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all()), total

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def create_review(
        self,
        book_id: int,
        author_id: int,
        rating: int,
        comment: str | None = None,
    ) -> Review:
        """
        Insert the author's review of a book.

        Args:
            book_id: Book being reviewed
            author_id: Verified ID of the user writing the review
            rating: 1-5 stars
            comment: Optional review text

        Returns:
            The stored review with its id and created_at

        Raises:
            ValidationError: Rating or comment out of bounds
            NotFoundError: Book does not exist
            DuplicateReviewError: The author already reviewed this book
        """
        rating = validate_rating(rating)
        comment = validate_comment(comment)

        if self.db.get(Book, book_id) is None:
            raise NotFoundError(f"Book with id {book_id} not found")

        review = Review(book_id=book_id, user_id=author_id, rating=rating, comment=comment)
        try:
            with self.db.begin_nested():
                self.db.add(review)
        except IntegrityError as exc:
            self._raise_for_rejected_insert(exc, book_id, author_id)

        self.db.commit()
        self.db.refresh(review)
        logger.info(f"Review {review.id} created for book {book_id} by user {author_id}")

        self._publish(EventType.REVIEW_CREATED, review)
        return review

    def update_review(
        self,
        review_id: int,
        rating: int = UNSET,
        comment: str | None = UNSET,
    ) -> Review:
        """
        Change the rating and/or comment of an existing review.

        Ownership is checked by the caller before this is called. Fields
        left UNSET keep their stored value; comment=None clears the text.

        Args:
            review_id: Review to update
            rating: New 1-5 star rating
            comment: New review text, or None

        Raises:
            NotFoundError: Review does not exist
            ValidationError: Value out of bounds
        """
        changes: dict[str, Any] = {}
        if rating is not UNSET:
            changes["rating"] = validate_rating(rating)
        if comment is not UNSET:
            changes["comment"] = validate_comment(comment)

        review = self.get_review(review_id)
        for field, value in changes.items():
            setattr(review, field, value)

        self.db.commit()
        self.db.refresh(review)
        logger.info(f"Review {review.id} updated for book {review.book_id}")

        self._publish(EventType.REVIEW_UPDATED, review)
        return review

    def delete_review(self, review_id: int) -> None:
        """
        Remove a review.

        Raises:
            NotFoundError: Review does not exist
        """
        review = self.get_review(review_id)
        event = ReviewEvent(
            type=EventType.REVIEW_DELETED,
            book_id=review.book_id,
            review_id=review.id,
            author_id=review.user_id,
        )

        self.db.delete(review)
        self.db.commit()
        logger.info(f"Review {event.review_id} deleted from book {event.book_id}")

        self.events.publish(event)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _publish(self, event_type: EventType, review: Review) -> None:
        self.events.publish(
            ReviewEvent(
                type=event_type,
                book_id=review.book_id,
                review_id=review.id,
                author_id=review.user_id,
            )
        )

    def _raise_for_rejected_insert(self, exc: IntegrityError, book_id: int, author_id: int) -> NoReturn:
        """Translate a constraint violation from the review insert."""
        existing = self.db.execute(
            select(Review.id).where(Review.book_id == book_id, Review.user_id == author_id)
        ).scalar_one_or_none()
        if existing is not None:
            logger.info(f"Duplicate review rejected for book {book_id} by user {author_id}")
            raise DuplicateReviewError(book_id, author_id) from exc

        # Foreign key violation: the book was deleted after the existence check.
        if self.db.get(Book, book_id) is None:
            raise NotFoundError(f"Book with id {book_id} not found") from exc
        raise exc
