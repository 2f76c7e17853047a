"""
Book Reviews API Package

REST API for a book catalog with user reviews and per-book rating
aggregates.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- exceptions.py: Domain errors raised by the services
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Review store, rating aggregation, event bus, security
"""

__version__ = "0.1.0"
