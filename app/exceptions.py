"""
Application Exceptions

Route code raises these; the handlers registered in app.main turn them
into HTTP responses:

- NotFoundError           -> 404, plain-text message
- PayloadValidationError  -> 400, JSON validation error report
"""


class BooksAPIError(Exception):
    """Base class for errors the API converts into responses."""


class NotFoundError(BooksAPIError):
    """
    A referenced record does not exist.

    Also used for path ids that are not integers: to a client, /books/abc
    and /books/999 are both a book that is not there.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PayloadValidationError(BooksAPIError):
    """
    The request body failed validation.

    errors maps each failing field (by wire name) to its messages; errors
    about the body as a whole are listed under "_errors".
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(f"Invalid payload: {', '.join(errors)}")
        self.errors = errors
