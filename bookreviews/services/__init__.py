"""
Services Package

Business logic kept separate from HTTP handling (routers) so it can be
used from scripts and tested in isolation.

Current services:
- reviews.py: Review store (writes, uniqueness, validation)
- ratings.py: Book rating aggregation engine
- events.py: In-process review event bus
- consistency.py: Trigger that recomputes ratings after review mutations
- security.py: Password hashing and JWT utilities
- rate_limiter.py: Rate limiting with slowapi
"""
