"""
Books Router

Catalog endpoints. Books carry their rating aggregate
(average_rating, review_count) as of the last completed recompute;
clients never write those fields.

Endpoints:
- GET /books/ - Paginated catalog, newest first
- GET /books/{book_id} - One book
- POST /books/ - Add a book (authenticated)
- DELETE /books/{book_id} - Remove a book and its reviews (superuser)
"""

import logging
import math

from fastapi import APIRouter, Request, status
from sqlalchemy import func, select

from bookreviews.config import get_settings
from bookreviews.dependencies import (
    ActiveUser,
    DbSession,
    Pagination,
    SuperUser,
    get_book_or_404,
)
from bookreviews.models import Book
from bookreviews.schemas.book import BookCreate, BookListResponse, BookResponse
from bookreviews.services.rate_limiter import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


@router.get(
    "/",
    response_model=BookListResponse,
    summary="List books",
    description="Get a paginated list of books, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
) -> BookListResponse:
    total = db.execute(select(func.count()).select_from(Book)).scalar() or 0
    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    stmt = (
        select(Book)
        .order_by(Book.created_at.desc(), Book.id.desc())
        .offset(pagination.skip)
        .limit(pagination.per_page)
    )
    books = db.execute(stmt).scalars().all()

    return BookListResponse(
        items=[BookResponse.model_validate(book) for book in books],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
) -> BookResponse:
    return BookResponse.model_validate(get_book_or_404(db, book_id))


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    description="Add a book to the catalog. Requires authentication.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    current_user: ActiveUser,
) -> BookResponse:
    """
    Create a new book.

    The rating aggregate starts at average_rating=0, review_count=0.
    """
    book = Book(**book_data.model_dump())
    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book {book.id} created by user {current_user.id}")

    return BookResponse.model_validate(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Delete a book and all of its reviews. Superuser only.",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: SuperUser,
) -> None:
    book = get_book_or_404(db, book_id)
    db.delete(book)
    db.commit()

    logger.info(f"Book {book_id} deleted by user {current_user.id}")
