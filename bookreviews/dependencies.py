"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- Database sessions (per-request)
- Pagination parameters
- JWT authentication (current user, active user, superuser)
- Review store and aggregation engine wired to the request's session
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookreviews.config import get_settings
from bookreviews.database import get_db
from bookreviews.models import Book, User
from bookreviews.services.consistency import create_review_store
from bookreviews.services.ratings import AggregationEngine
from bookreviews.services.reviews import ReviewStore
from bookreviews.services.security import verify_token_type

settings = get_settings()

# Instead of `db: Session = Depends(get_db)` routes can write `db: DbSession`.
DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - per_page: How many items per page
    - skip: Calculated offset for database query
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        per_page: int = Query(
            default=10,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.per_page = per_page

    @property
    def skip(self) -> int:
        """Number of records to skip: page 1 → 0, page 2 → per_page, ..."""
        return (self.page - 1) * self.per_page


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Lookup Helpers
# =============================================================================
def get_book_or_404(db: Session, book_id: int) -> Book:
    """Get a book by ID or raise 404."""
    book = db.get(Book, book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id {book_id} not found",
        )
    return book


# =============================================================================
# Review Services
# =============================================================================
def get_review_store(db: DbSession) -> ReviewStore:
    """Review store for this request, with rating recompute attached."""
    return create_review_store(db)


def get_aggregation_engine(store: Annotated[ReviewStore, Depends(get_review_store)]) -> AggregationEngine:
    """Aggregation engine sharing the request's session and review store."""
    return AggregationEngine(store.db, store)


ReviewStoreDep = Annotated[ReviewStore, Depends(get_review_store)]
AggregationEngineDep = Annotated[AggregationEngine, Depends(get_aggregation_engine)]


# =============================================================================
# JWT Authentication (User Authentication)
# =============================================================================
# OAuth2PasswordBearer extracts "Authorization: Bearer <token>", returns 401
# when it is missing, and adds the "Authorize" button to Swagger UI.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"/api/{settings.api_version}/auth/login",
    auto_error=True,
)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Extract and validate the current user from JWT token.

    Raises:
        HTTPException: 401 if token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token_type(token, "access")
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise credentials_exception

    stmt = select(User).where(User.id == int(user_id))
    user = db.execute(stmt).scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Verify the current user is active.

    Raises:
        HTTPException: 403 if user is inactive
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return current_user


def get_current_superuser(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """
    Verify the current user has superuser (moderator) privileges.

    Raises:
        HTTPException: 403 if user is not a superuser
    """
    if not current_user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Superuser privileges required",
        )
    return current_user


ActiveUser = Annotated[User, Depends(get_current_active_user)]
SuperUser = Annotated[User, Depends(get_current_superuser)]
