"""
Test Suite for Book Reviews API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_events.py: EventBus publish/subscribe
- test_review_store.py: ReviewStore invariants (validation, uniqueness, events)
- test_ratings.py: Aggregate math and AggregationEngine
- test_consistency.py: Trigger wiring and the rating invariant over
  random mutation sequences
- test_auth.py, test_books.py, test_reviews.py: HTTP endpoints

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_ratings.py

    # Run with verbose output
    pytest -v
"""
