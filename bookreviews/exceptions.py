"""
Domain Exceptions

Errors raised by the review store and the rating aggregation engine.

Services raise these instead of HTTPException so they can be used outside
a request (scripts, tests). main.create_app() registers handlers that turn
them into JSON error responses:

- NotFoundError        → 404
- DuplicateReviewError → 409
- ValidationError      → 422
"""


class BookReviewsError(Exception):
    """Base exception for all book review service errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(BookReviewsError):
    """A referenced book or review does not exist."""


class DuplicateReviewError(BookReviewsError):
    """The author already has a review for this book."""

    def __init__(self, book_id: int, author_id: int) -> None:
        super().__init__("You have already reviewed this book. You can update your existing review.")
        self.book_id = book_id
        self.author_id = author_id


class ValidationError(BookReviewsError):
    """A rating or review text is out of bounds. Nothing was written."""
