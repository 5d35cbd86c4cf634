"""
Books Router

CRUD endpoints for books:

    GET    /books/        list every book with its author's name
    POST   /books/        create a book (201)
    GET    /books/{id}    one book with its author's name
    PUT    /books/{id}    replace title, description and authorId
    DELETE /books/{id}    delete and return the deleted book

Every route requires a bearer token (router-level dependency).

Ids that are not integers get the same 404 as ids that do not exist.

The router is built per application by create_books_router(), so each
app's Limiter and Settings decide its rate limits.
"""

import logging
import re

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter

from app.config import Settings
from app.dependencies import JsonBody, Store, require_token
from app.exceptions import NotFoundError
from app.models import Book
from app.schemas import BookPayload, BookRecord, BookWithAuthor
from app.services.validation import validate_payload

logger = logging.getLogger(__name__)

BOOK_NOT_FOUND = "Book not found"
AUTHOR_NOT_FOUND = "Author not found"

# books.id is an INTEGER column; ASCII digits only, at most 10 of them
ID_PATTERN = re.compile(r"-?[0-9]{1,10}")
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1

# The body is read by JsonBody rather than declared as a model, so
# describe it for the OpenAPI docs explicitly.
BOOK_PAYLOAD_DOCS = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": BookPayload.model_json_schema(by_alias=True),
            }
        },
    }
}

PAYLOAD_ERRORS = {400: {"description": "Validation error report"}}


# =============================================================================
# Helper Functions
# =============================================================================
def parse_book_id(raw_id: str) -> int:
    """
    Parse a path id.

    Raises:
        NotFoundError: if raw_id is not a base-10 integer in INTEGER range
    """
    if not ID_PATTERN.fullmatch(raw_id):
        logger.debug(f"Rejected non-integer book id {raw_id[:20]!r}")
        raise NotFoundError(BOOK_NOT_FOUND)

    book_id = int(raw_id)
    if not ID_MIN <= book_id <= ID_MAX:
        logger.debug(f"Rejected out-of-range book id {raw_id}")
        raise NotFoundError(BOOK_NOT_FOUND)

    return book_id


def get_book_or_404(store: Store, book_id: int, with_author: bool = False) -> Book:
    """
    Get a book by ID or raise 404.

    Raises:
        NotFoundError: if the book does not exist
    """
    book = store.get_book(book_id, with_author=with_author)
    if book is None:
        logger.debug(f"Book {book_id} not found")
        raise NotFoundError(BOOK_NOT_FOUND)
    return book


def ensure_author_exists(store: Store, author_id: int) -> None:
    """
    Raises:
        NotFoundError: if no author has this ID
    """
    # Out-of-range ids cannot exist and would overflow the INTEGER column
    if not ID_MIN <= author_id <= ID_MAX or store.get_author(author_id) is None:
        logger.debug(f"Author {author_id} not found")
        raise NotFoundError(AUTHOR_NOT_FOUND)


# =============================================================================
# CRUD Endpoints
# =============================================================================
def list_books(
    request: Request,
    store: Store,
) -> list[BookWithAuthor]:
    """List all books in store order."""
    books = store.list_books()
    return [BookWithAuthor.model_validate(book) for book in books]


def create_book(
    request: Request,
    store: Store,
    body: JsonBody,
) -> BookRecord:
    """
    Create a new book.

    The body is validated before the database is touched. The response is
    the stored row without the author join.

    Raises:
        PayloadValidationError: 400 if the body is invalid
        NotFoundError: 404 if authorId does not reference an author
    """
    payload = validate_payload(BookPayload, body)
    ensure_author_exists(store, payload.author_id)

    book = store.create_book(payload)
    return BookRecord.model_validate(book)


def get_book(
    request: Request,
    book_id: str,
    store: Store,
) -> BookWithAuthor:
    """Get a single book by its ID."""
    book = get_book_or_404(store, parse_book_id(book_id), with_author=True)
    return BookWithAuthor.model_validate(book)


def update_book(
    request: Request,
    book_id: str,
    store: Store,
    body: JsonBody,
) -> BookRecord:
    """
    Replace an existing book.

    PUT semantics: all three fields are required and all are written.
    The new authorId is checked the same way create checks it.

    Raises:
        NotFoundError: 404 if the id is not an integer, the book does not
            exist, or authorId does not reference an author
        PayloadValidationError: 400 if the body is invalid
    """
    parsed_id = parse_book_id(book_id)
    payload = validate_payload(BookPayload, body)

    book = get_book_or_404(store, parsed_id)
    ensure_author_exists(store, payload.author_id)

    book = store.update_book(book, payload)
    return BookRecord.model_validate(book)


def delete_book(
    request: Request,
    book_id: str,
    store: Store,
) -> BookRecord:
    """
    Delete a book.

    Returns the deleted book's values; a second delete of the same id
    is a 404.
    """
    book = get_book_or_404(store, parse_book_id(book_id))

    # Copy before the commit expires the instance
    deleted = BookRecord.model_validate(book)
    store.delete_book(book)
    return deleted


# =============================================================================
# Router Factory
# =============================================================================
def create_books_router(limiter: Limiter, settings: Settings) -> APIRouter:
    """
    Build the books router with one app's rate limits.

    Reads (list, get) are limited by settings.rate_limit_default and
    writes (create, update, delete) by settings.rate_limit_write.

    Args:
        limiter: The app's Limiter (also stored on app.state.limiter)
        settings: The app's Settings

    Returns:
        APIRouter to be mounted at settings.api_prefix
    """
    read_limit = limiter.limit(settings.rate_limit_default)
    write_limit = limiter.limit(settings.rate_limit_write)

    router = APIRouter(
        prefix="/books",
        tags=["Books"],
        dependencies=[Depends(require_token)],
        responses={
            401: {"description": "Missing or invalid bearer token"},
            404: {"description": "Book not found"},
            429: {"description": "Rate limit exceeded"},
        },
    )

    router.add_api_route(
        "/",
        read_limit(list_books),
        methods=["GET"],
        response_model=list[BookWithAuthor],
        summary="List all books",
        description="Get every book, each with its author's name.",
    )
    router.add_api_route(
        "/",
        write_limit(create_book),
        methods=["POST"],
        response_model=BookRecord,
        status_code=status.HTTP_201_CREATED,
        summary="Create a new book",
        description="Create a book for an existing author.",
        responses={**PAYLOAD_ERRORS, 404: {"description": "Author not found"}},
        openapi_extra=BOOK_PAYLOAD_DOCS,
    )
    router.add_api_route(
        "/{book_id}",
        read_limit(get_book),
        methods=["GET"],
        response_model=BookWithAuthor,
        summary="Get a book by ID",
        description="Retrieve a book with its author's name.",
    )
    router.add_api_route(
        "/{book_id}",
        write_limit(update_book),
        methods=["PUT"],
        response_model=BookRecord,
        summary="Replace a book",
        description="Overwrite a book's title, description and authorId.",
        responses={**PAYLOAD_ERRORS, 404: {"description": "Book or author not found"}},
        openapi_extra=BOOK_PAYLOAD_DOCS,
    )
    router.add_api_route(
        "/{book_id}",
        write_limit(delete_book),
        methods=["DELETE"],
        response_model=BookRecord,
        summary="Delete a book",
        description="Permanently delete a book and return its last values.",
    )

    return router
