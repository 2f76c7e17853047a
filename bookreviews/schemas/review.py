"""
Review Pydantic Schemas

Schemas for book reviews with ratings.

Schemas:
- ReviewCreate: Create a new review
- ReviewUpdate: Update an existing review
- ReviewResponse: Full review data for API responses
- ReviewListResponse: Paginated list of reviews
- BookRatingStats: Stored rating aggregate plus star distribution

Business Rules:
- Rating must be 1-5 (validated here and again by the review store)
- One review per user per book (enforced at database level)
- Users can only edit/delete their own reviews
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookreviews.config import get_settings
from bookreviews.schemas.user import UserPublicResponse

settings = get_settings()


def _normalize_comment(v: str | None) -> str | None:
    """Strip whitespace; a blank comment is stored as no comment."""
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if len(v) > settings.review_text_max_length:
        raise ValueError(
            f"comment must be at most {settings.review_text_max_length} characters"
        )
    return v


class ReviewBase(BaseModel):
    """Shared review fields."""

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        strict=True,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str | None = Field(
        default=None,
        description="Review text",
        examples=["This book changed my perspective on..."],
    )

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str | None) -> str | None:
        return _normalize_comment(v)


class ReviewCreate(ReviewBase):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "comment": "One of the best books I've ever read..."
    }
    """

    pass


class ReviewUpdate(BaseModel):
    """
    Schema for updating an existing review.

    Both fields are optional; only fields present in the request body are
    changed.
    """

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        strict=True,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        description="Review text (null clears it)",
    )

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str | None) -> str | None:
        return _normalize_comment(v)


class ReviewResponse(BaseModel):
    """Review as returned by the API, with its author's public profile."""

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    user_id: int = Field(..., description="ID of the user who wrote the review")
    rating: int = Field(..., description="Rating from 1 to 5 stars")
    comment: str | None = Field(default=None, description="Review text")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")
    user: UserPublicResponse = Field(..., description="User who wrote the review")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "book_id": 42,
                "user_id": 7,
                "rating": 5,
                "comment": "This book completely changed my perspective on...",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
                "user": {
                    "id": 7,
                    "username": "booklover",
                    "full_name": "Jane Doe",
                    "created_at": "2024-01-01T00:00:00Z",
                },
            }
        },
    )


class ReviewListResponse(BaseModel):
    """Paginated list of reviews, newest first."""

    items: list[ReviewResponse] = Field(..., description="List of reviews for this page")
    total: int = Field(..., ge=0, description="Total number of reviews")
    page: int = Field(..., ge=1, description="Current page number")
    per_page: int = Field(..., ge=1, le=100, description="Number of items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")


# =============================================================================
# Aggregation Schemas
# =============================================================================


class BookRatingStats(BaseModel):
    """
    Rating statistics for a book.

    average_rating and review_count are the stored aggregate fields;
    rating_distribution is counted from the current reviews.
    """

    book_id: int = Field(..., description="Book ID")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating (0-5, 0 means no reviews)"
    )
    review_count: int = Field(
        ...,
        ge=0,
        description="Total number of reviews"
    )
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of each rating (1-5)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "book_id": 42,
                "average_rating": 4.2,
                "review_count": 125,
                "rating_distribution": {"1": 5, "2": 10, "3": 20, "4": 40, "5": 50},
            }
        },
    )
