"""
Pydantic Schemas Package

Pydantic models for request/response validation, kept separate from the
SQLAlchemy models so the API shape can evolve independently of the tables.

Schema Naming Convention:
- XxxPayload: Request body
- XxxRecord: A stored row as returned to clients
- XxxWithYyy: A stored row with joined data
"""

from app.schemas.author import AuthorName
from app.schemas.book import BookPayload, BookRecord, BookWithAuthor

__all__ = [
    "AuthorName",
    "BookPayload",
    "BookRecord",
    "BookWithAuthor",
]
