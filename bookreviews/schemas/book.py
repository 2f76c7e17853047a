"""
Book Pydantic Schemas

Schemas:
- BookCreate: Fields accepted when adding a book to the catalog
- BookResponse: Book data including the rating aggregate
- BookListResponse: Paginated list of books

average_rating and review_count are read-only: they are derived from
reviews and never accepted from clients.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookreviews.config import get_settings

settings = get_settings()


class BookBase(BaseModel):
    """Shared book fields with title/author normalization."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell"],
    )

    description: str | None = Field(
        default=None,
        description="Book description or summary",
        examples=["A dystopian novel set in a totalitarian society..."],
    )

    cover_url: str | None = Field(
        default=None,
        max_length=2000,
        description="URL to a cover image",
    )

    @field_validator("title", "author")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only values and strip surrounding space."""
        if not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v.strip()

    @field_validator("description")
    @classmethod
    def description_within_limit(cls, v: str | None) -> str | None:
        """Bound the description length by configuration."""
        if v is not None and len(v) > settings.book_description_max_length:
            raise ValueError(
                f"description must be at most {settings.book_description_max_length} characters"
            )
        return v


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "description": "A dystopian novel..."
    }
    """

    pass


class BookResponse(BookBase):
    """Book as returned by the API, with its current rating aggregate."""

    id: int = Field(..., description="Unique book identifier")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Mean review rating (0 means no reviews)",
    )
    review_count: int = Field(..., ge=0, description="Number of reviews")
    created_at: datetime = Field(..., description="When the book was added")
    updated_at: datetime = Field(..., description="When the book was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 42,
                "title": "1984",
                "author": "George Orwell",
                "description": "A dystopian novel set in a totalitarian society.",
                "cover_url": None,
                "average_rating": 4.333333333333333,
                "review_count": 3,
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-16T08:00:00Z",
            }
        },
    )


class BookListResponse(BaseModel):
    """Paginated list of books."""

    items: list[BookResponse] = Field(..., description="Books on this page")
    total: int = Field(..., ge=0, description="Total number of books")
    page: int = Field(..., ge=1, description="Current page number")
    per_page: int = Field(..., ge=1, le=100, description="Number of items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")
