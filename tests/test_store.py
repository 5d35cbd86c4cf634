"""
Tests for BookStore

The persistence gateway is tested against the in-memory test database
directly, without going through HTTP.
"""

from app.models import Book
from app.schemas import BookPayload
from app.services.store import BookStore


def make_payload(author_id: int, **overrides) -> BookPayload:
    data = {"title": "Dune", "description": "Desert planet saga", "author_id": author_id}
    data.update(overrides)
    return BookPayload(**data)


class TestBookStoreReads:
    """Tests for list_books, get_book and get_author."""

    def test_list_books_empty(self, db_session):
        assert BookStore(db_session).list_books() == []

    def test_list_books_loads_author(self, db_session, sample_book):
        books = BookStore(db_session).list_books()

        assert [book.id for book in books] == [sample_book.id]
        assert books[0].author.name == "Frank Herbert"

    def test_get_book(self, db_session, sample_book):
        book = BookStore(db_session).get_book(sample_book.id, with_author=True)

        assert book is not None
        assert book.title == "Dune"
        assert book.author.name == "Frank Herbert"

    def test_get_book_missing(self, db_session):
        assert BookStore(db_session).get_book(99999) is None

    def test_get_author(self, db_session, sample_author):
        store = BookStore(db_session)

        assert store.get_author(sample_author.id).name == "Frank Herbert"
        assert store.get_author(99999) is None


class TestBookStoreWrites:
    """Tests for create_book, update_book and delete_book."""

    def test_create_book(self, db_session, sample_author):
        book = BookStore(db_session).create_book(make_payload(sample_author.id))

        assert book.id is not None
        assert book.title == "Dune"
        assert book.author_id == sample_author.id
        assert db_session.get(Book, book.id) is book

    def test_create_book_accepts_wire_names(self, db_session, sample_author):
        """Test that BookPayload built from the JSON spelling stores correctly."""
        payload = BookPayload.model_validate(
            {"title": "Dune", "description": "Desert planet saga", "authorId": sample_author.id}
        )

        book = BookStore(db_session).create_book(payload)

        assert book.author_id == sample_author.id

    def test_update_book_full_replace(self, db_session, sample_book, second_author):
        store = BookStore(db_session)

        book = store.update_book(
            sample_book,
            make_payload(second_author.id, title="Lavinia", description="A retelling"),
        )

        assert book.id == sample_book.id
        assert book.title == "Lavinia"
        assert book.description == "A retelling"
        assert book.author_id == second_author.id
        assert store.get_book(book.id, with_author=True).author.name == "Ursula K. Le Guin"

    def test_delete_book(self, db_session, sample_book):
        store = BookStore(db_session)
        book_id = sample_book.id

        store.delete_book(sample_book)

        assert store.get_book(book_id) is None
        assert store.list_books() == []
