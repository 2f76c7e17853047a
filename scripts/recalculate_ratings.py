#!/usr/bin/env python3
"""
Rating Recalculation Script

Rebuilds average_rating and review_count from the reviews table.

Run this after restoring a backup, after bulk-loading reviews outside
the API, or when a recompute was dropped (the consistency trigger logs
"Rating recompute failed" when that happens).

Usage:
    # Every book:
    python scripts/recalculate_ratings.py

    # Specific books:
    python scripts/recalculate_ratings.py --book-id 3 --book-id 7
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookreviews.database import SessionLocal
from bookreviews.exceptions import NotFoundError
from bookreviews.services.ratings import AggregationEngine
from bookreviews.services.reviews import ReviewStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def recalculate(book_ids: list[int] | None = None) -> int:
    """
    Recompute rating aggregates.

    Args:
        book_ids: Books to recompute, or None for every book

    Returns:
        Number of books updated
    """
    db = SessionLocal()
    try:
        engine = AggregationEngine(db, ReviewStore(db))

        if not book_ids:
            return engine.recompute_all()

        updated = 0
        for book_id in book_ids:
            try:
                aggregate = engine.recompute(book_id)
            except NotFoundError:
                logger.warning(f"Book {book_id} not found, skipping")
                continue
            logger.info(
                f"Book {book_id}: average_rating={aggregate.average_rating} "
                f"review_count={aggregate.review_count}"
            )
            updated += 1
        return updated
    finally:
        db.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Recompute book rating aggregates from stored reviews"
    )
    parser.add_argument(
        "--book-id",
        type=int,
        action="append",
        dest="book_ids",
        help="Book to recompute (repeatable; default: all books)",
    )
    args = parser.parse_args()

    updated = recalculate(args.book_ids)
    logger.info(f"Done. {updated} book(s) updated.")


if __name__ == "__main__":
    main()
