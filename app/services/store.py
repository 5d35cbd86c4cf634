"""
Book Store

The persistence gateway used by the books routes. It wraps one SQLAlchemy
session (one request) and offers exactly the operations the routes need:

- list_books / get_book: read books, optionally with the author loaded
- get_author: existence check for authorId
- create_book / update_book / delete_book: writes, each committed

Routes never build queries themselves, and tests can exercise the store
directly with a session.

No transaction spans a lookup and the write that follows it. Two requests
updating the same book race with last-writer-wins semantics, and an author
deleted between the existence check and the insert is not detected.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.models import Author, Book
from app.schemas import BookPayload

logger = logging.getLogger(__name__)


class BookStore:
    """Book and author data access for a single request."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def list_books(self) -> Sequence[Book]:
        """
        Every book with its author loaded.

        No ORDER BY: rows come back in whatever order the database uses.
        joinedload fetches the authors in the same query, avoiding N+1.
        """
        stmt = select(Book).options(joinedload(Book.author))
        return self.db.execute(stmt).scalars().all()

    def get_book(self, book_id: int, with_author: bool = False) -> Book | None:
        """Find a book by ID, or None."""
        stmt = select(Book).where(Book.id == book_id)
        if with_author:
            stmt = stmt.options(joinedload(Book.author))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_author(self, author_id: int) -> Author | None:
        """Find an author by ID, or None."""
        return self.db.get(Author, author_id)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def create_book(self, payload: BookPayload) -> Book:
        book = Book(
            title=payload.title,
            description=payload.description,
            author_id=payload.author_id,
        )
        self.db.add(book)
        self.db.commit()
        self.db.refresh(book)
        logger.info(f"Created book {book.id} for author {book.author_id}")
        return book

    def update_book(self, book: Book, payload: BookPayload) -> Book:
        """
        Overwrite all three fields of book with payload.

        This is a full replace: nothing from the old row is kept.
        """
        book.title = payload.title
        book.description = payload.description
        book.author_id = payload.author_id
        self.db.commit()
        self.db.refresh(book)
        logger.info(f"Updated book {book.id}")
        return book

    def delete_book(self, book: Book) -> None:
        """
        Delete book.

        Attributes of book are expired by the commit; callers that need
        the deleted values must copy them first.
        """
        book_id = book.id
        self.db.delete(book)
        self.db.commit()
        logger.info(f"Deleted book {book_id}")
