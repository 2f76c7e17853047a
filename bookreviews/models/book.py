"""
Book Model

A catalog entry. Everything except the two aggregate fields is owned by
the books router; average_rating and review_count are written only by the
rating aggregation engine (services/ratings.py).
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreviews.database import Base

if TYPE_CHECKING:
    from bookreviews.models.review import Review


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title: Book title (required)
    - author: Author name (required, free text)
    - description: Book summary/description
    - cover_url: Link to a cover image
    - average_rating: Mean of all review ratings, 0 when there are none
    - review_count: Number of reviews

    Relationships:
    - reviews: One-to-Many (deleting a book deletes its reviews)

    Example:
        book = Book(title="1984", author="George Orwell")
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book description or summary"
    )

    cover_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="URL to a cover image"
    )

    # -------------------------------------------------------------------------
    # Rating Aggregates
    # -------------------------------------------------------------------------
    # Stored at full float precision; rounding is left to clients.
    average_rating: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        server_default="0",
        nullable=False,
        index=True,
        comment="Mean review rating, 0 if no reviews"
    )

    review_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Number of reviews for this book"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # passive_deletes lets the ON DELETE CASCADE foreign key remove reviews
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="ck_book_average_rating_range",
        ),
        CheckConstraint("review_count >= 0", name="ck_book_review_count_non_negative"),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"
