"""
SQLAlchemy Models Package

Model Relationships:
- Author <- Book: Many-to-One (an author can write many books,
                  a book has exactly one author)

Import all models here to:
1. Make them available as: from app.models import Book, Author
2. Register them with Base.metadata before create_all() runs
"""

# The order matters for SQLAlchemy to resolve relationships
from app.models.author import Author
from app.models.book import Book

__all__ = [
    "Author",
    "Book",
]
