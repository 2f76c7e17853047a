"""
Reviews Router

Endpoints for book reviews and rating statistics.

Endpoints:
- GET /books/{book_id}/reviews - List reviews for a book
- POST /books/{book_id}/reviews - Create a review (authenticated)
- GET /books/{book_id}/rating - Get book rating statistics
- POST /books/{book_id}/rating/recompute - Recompute a book's rating (superuser)
- GET /reviews/{review_id} - Get a specific review
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner or superuser)

Business Rules:
- One review per user per book (enforced by database constraint)
- Only the review author can update their review
- Only the review author or superusers can delete a review

Writes go through the ReviewStore; each one recomputes the book's rating
before the response is sent. Store errors (NotFoundError,
DuplicateReviewError, ValidationError) are turned into HTTP responses by
the handlers registered in main.py.
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Request, status

from bookreviews.config import get_settings
from bookreviews.dependencies import (
    ActiveUser,
    AggregationEngineDep,
    DbSession,
    Pagination,
    ReviewStoreDep,
    SuperUser,
    get_book_or_404,
)
from bookreviews.schemas.review import (
    BookRatingStats,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreviews.services.rate_limiter import limiter
from bookreviews.services.ratings import rating_distribution

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


# =============================================================================
# Book Review Endpoints
# =============================================================================


@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a book",
    description="Get a paginated list of reviews for a specific book, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: int,
    db: DbSession,
    store: ReviewStoreDep,
    pagination: Pagination,
) -> ReviewListResponse:
    get_book_or_404(db, book_id)

    reviews, total = store.list_for_book(book_id, pagination.skip, pagination.per_page)
    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    return ReviewListResponse(
        items=[ReviewResponse.model_validate(r) for r in reviews],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a new review for a book. Requires authentication. One review per book per user.",
    responses={409: {"description": "User already reviewed this book"}},
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    book_id: int,
    review_data: ReviewCreate,
    store: ReviewStoreDep,
    current_user: ActiveUser,
) -> ReviewResponse:
    """
    Create a new review for a book.

    Raises:
        NotFoundError: 404 if book not found
        DuplicateReviewError: 409 if user already reviewed this book
    """
    review = store.create_review(
        book_id=book_id,
        author_id=current_user.id,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return ReviewResponse.model_validate(review)


@router.get(
    "/books/{book_id}/rating",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
    description="Stored average rating and review count plus the 1-5 star distribution.",
)
@limiter.limit(settings.rate_limit_default)
def get_book_rating_stats(
    request: Request,
    book_id: int,
    db: DbSession,
    store: ReviewStoreDep,
) -> BookRatingStats:
    book = get_book_or_404(db, book_id)
    distribution = rating_distribution(r.rating for r in store.find_by_book(book_id))

    return BookRatingStats(
        book_id=book_id,
        average_rating=book.average_rating,
        review_count=book.review_count,
        rating_distribution=distribution,
    )


@router.post(
    "/books/{book_id}/rating/recompute",
    response_model=BookRatingStats,
    summary="Recompute book rating",
    description="Rebuild a book's rating aggregate from its reviews. Superuser only.",
)
@limiter.limit(settings.rate_limit_write)
def recompute_book_rating(
    request: Request,
    book_id: int,
    engine: AggregationEngineDep,
    current_user: SuperUser,
) -> BookRatingStats:
    aggregate = engine.recompute(book_id)
    distribution = rating_distribution(r.rating for r in engine.reviews.find_by_book(book_id))

    logger.info(f"Rating for book {book_id} recomputed by user {current_user.id}")

    return BookRatingStats(
        book_id=book_id,
        average_rating=aggregate.average_rating,
        review_count=aggregate.review_count,
        rating_distribution=distribution,
    )


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    store: ReviewStoreDep,
) -> ReviewResponse:
    return ReviewResponse.model_validate(store.get_review(review_id))


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Update your own review. Only the review author can update.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    review_data: ReviewUpdate,
    store: ReviewStoreDep,
    current_user: ActiveUser,
) -> ReviewResponse:
    """
    Update an existing review.

    Raises:
        NotFoundError: 404 if review not found
        HTTPException: 403 if user is not the review author
    """
    review = store.get_review(review_id)

    if review.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only update your own reviews",
        )

    review = store.update_review(review_id, **review_data.model_dump(exclude_unset=True))
    return ReviewResponse.model_validate(review)


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Delete a review. Only the review author or superusers can delete.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    store: ReviewStoreDep,
    current_user: ActiveUser,
) -> None:
    """
    Delete a review.

    - Review authors can delete their own reviews
    - Superusers can delete any review (moderation)
    """
    review = store.get_review(review_id)

    if review.user_id != current_user.id and not current_user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own reviews",
        )

    store.delete_review(review_id)
