"""
Pydantic Schemas Package

Request/response models, kept separate from the SQLAlchemy models so the
API controls exactly what is accepted and exposed.

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (usually all optional)
- XxxResponse: Fields returned in API responses
"""

from bookreviews.schemas.book import (
    BookBase,
    BookCreate,
    BookListResponse,
    BookResponse,
)
from bookreviews.schemas.user import (
    TokenResponse,
    UserCreate,
    UserPublicResponse,
    UserResponse,
)
from bookreviews.schemas.review import (
    BookRatingStats,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)

__all__ = [
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookResponse",
    "BookListResponse",
    # User schemas
    "UserCreate",
    "UserResponse",
    "UserPublicResponse",
    "TokenResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewListResponse",
    "BookRatingStats",
]
