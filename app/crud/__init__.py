"""
Data access for database tables.

This layer keeps SQL out of the API routes, following the Repository pattern.
"""

from app.crud.job import JobRepository

__all__ = ["JobRepository"]
