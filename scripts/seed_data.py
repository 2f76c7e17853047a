#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample users, books and reviews for
development.

USAGE:
    # From the project root with venv activated
    python scripts/seed_data.py

    # Keep existing rows
    python scripts/seed_data.py --keep

Reviews are written through the review store, so every book's
average_rating and review_count are recomputed exactly as they would be
for API traffic.
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookreviews.database import SessionLocal, create_tables
from bookreviews.models import Book, Review, User
from bookreviews.services.consistency import create_review_store
from bookreviews.services.security import hash_password

SEED_PASSWORD = "SeedPass123"


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> list[User]:
    """Create reader accounts plus one moderator."""
    print("Creating users...")
    users_data = [
        {"username": "admin", "full_name": "Site Moderator", "is_superuser": True},
        {"username": "alice", "full_name": "Alice Reader"},
        {"username": "bob", "full_name": "Bob Bookworm"},
        {"username": "carol", "full_name": "Carol Critic"},
        {"username": "dave", "full_name": "Dave Skimmer"},
    ]

    users = []
    for data in users_data:
        user = User(
            email=f"{data['username']}@example.com",
            hashed_password=hash_password(SEED_PASSWORD),
            is_active=True,
            **data,
        )
        db.add(user)
        users.append(user)

    db.commit()
    for user in users:
        db.refresh(user)

    print(f"Created {len(users)} users (password: {SEED_PASSWORD}).")
    return users


def create_books(db: Session) -> list[Book]:
    """Create sample books. Ratings start at zero."""
    print("Creating books...")
    books_data = [
        {
            "title": "1984",
            "author": "George Orwell",
            "description": "A dystopian novel set in a totalitarian surveillance state.",
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "description": "Elizabeth Bennet and Mr. Darcy misjudge each other "
                           "across the drawing rooms of Regency England.",
        },
        {
            "title": "The Old Man and the Sea",
            "author": "Ernest Hemingway",
            "description": "An aging Cuban fisherman struggles with a giant marlin.",
        },
        {
            "title": "Foundation",
            "author": "Isaac Asimov",
            "description": "A mathematician predicts the fall of the Galactic Empire.",
        },
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "description": "Bilbo Baggins is swept into a quest to reclaim a dwarven kingdom.",
        },
        {
            "title": "Murder on the Orient Express",
            "author": "Agatha Christie",
            "description": None,
        },
    ]

    books = []
    for data in books_data:
        book = Book(**data)
        db.add(book)
        books.append(book)

    db.commit()
    for book in books:
        db.refresh(book)

    print(f"Created {len(books)} books.")
    return books


def create_reviews(db: Session, users: list[User], books: list[Book]) -> int:
    """
    Review every book except the last, so one book keeps an empty aggregate.
    """
    print("Creating reviews...")
    store = create_review_store(db)
    readers = [user for user in users if not user.is_superuser]
    comments = {
        1: "Could not finish it.",
        2: "Had its moments.",
        3: "Solid, if uneven.",
        4: "Really enjoyed this one.",
        5: None,
    }

    created = 0
    for book_index, book in enumerate(books[:-1]):
        for reader_index, reader in enumerate(readers[: book_index + 1]):
            rating = (book_index + reader_index * 2) % 5 + 1
            store.create_review(
                book_id=book.id,
                author_id=reader.id,
                rating=rating,
                comment=comments[rating],
            )
            created += 1

    print(f"Created {created} reviews.")
    return created


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db)
        review_count = create_reviews(db, users, books)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)}")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {review_count}")
        for book in books:
            db.refresh(book)
            print(f"    {book.title}: {book.average_rating:.2f} ({book.review_count} reviews)")
        print("\nYou can now access the API at http://localhost:8001")
        print("API documentation at http://localhost:8001/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the book reviews database")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing rows instead of clearing them first",
    )
    args = parser.parse_args()
    seed_database(clear_existing=not args.keep)
