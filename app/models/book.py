"""
Book Model

The central model of the Books API.

Each book belongs to exactly one author (many-to-one). The foreign key
column is author_id; on the wire it is called authorId.

Referential integrity is checked by the books routes before a book is
created, rather than relied on from the database: SQLite (used in tests
and local development) does not enforce foreign keys by default.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.author import Author

TITLE_MAX_LENGTH = 255


class Book(Base):
    """
    Book model representing books in the library.

    Table: books

    Fields:
    - title: Book title, 1-255 characters
    - description: Book summary, non-empty, unbounded
    - author_id: Foreign key to authors.id

    Relationships:
    - author: Many-to-One (many books can share an author)

    Example:
        book = Book(
            title="Dune",
            description="Desert planet saga",
            author_id=1,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        index=True,
        nullable=False,
        comment="Book title"
    )

    # Text is for unlimited length strings
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id"),
        index=True,
        nullable=False,
        comment="Owning author"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    #   book.author   -> the Author row
    #   author.books  -> list of books
    author: Mapped["Author"] = relationship(
        "Author",
        back_populates="books",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author_id={self.author_id})"
