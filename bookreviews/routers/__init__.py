"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* endpoints (registration, login, current user)
- books.py: /api/v1/books/* catalog endpoints
- reviews.py: /api/v1/books/{id}/reviews, /api/v1/books/{id}/rating and
  /api/v1/reviews/* endpoints

Each router is imported and registered in main.py.
"""

from bookreviews.routers.auth import router as auth_router
from bookreviews.routers.books import router as books_router
from bookreviews.routers.reviews import router as reviews_router

__all__ = [
    "auth_router",
    "books_router",
    "reviews_router",
]
