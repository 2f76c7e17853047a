"""
SQLAlchemy Models Package

Model Relationships:
- Book -> Review: One-to-Many (deleting a book deletes its reviews)
- User -> Review: One-to-Many (a user has at most one review per book)

Import all models here so they are available as
`from bookreviews.models import Book, Review, User` and so Alembic
discovers them for migrations.
"""

from bookreviews.models.user import User
from bookreviews.models.book import Book
from bookreviews.models.review import Review

__all__ = [
    "Book",
    "Review",
    "User",
]
