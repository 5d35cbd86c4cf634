"""
Book Pydantic Schemas

- BookPayload: the body of create and update requests
- BookRecord: a stored book, as returned by create/update/delete
- BookWithAuthor: a stored book plus its author's name (list and get)

Wire names are camelCase (authorId); Python code uses author_id. Every
schema sets populate_by_name so both spellings are accepted when building
the model, and FastAPI serializes responses by alias.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.book import TITLE_MAX_LENGTH
from app.schemas.author import AuthorName


class BookPayload(BaseModel):
    """
    Request body for creating or replacing a book.

    All three fields are required. Titles and descriptions must be JSON
    strings. authorId must be a JSON number with no fractional part, so
    1 and 1.0 are accepted while 1.5, true and "1" are not.
    Unknown fields are ignored.

    The title= on each field is the label used in validation messages
    (see app.services.validation).

    Example request body:
    {
        "title": "Dune",
        "description": "Desert planet saga",
        "authorId": 1
    }
    """

    title: str = Field(
        ...,
        strict=True,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        title="Title",
        description="Book title",
        examples=["Dune"],
    )

    description: str = Field(
        ...,
        strict=True,
        min_length=1,
        title="Description",
        description="Book description or summary",
        examples=["Desert planet saga"],
    )

    author_id: int = Field(
        ...,
        alias="authorId",
        title="Author id",
        description="ID of an existing author",
        examples=[1],
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("author_id", mode="before")
    @classmethod
    def reject_non_numeric_author_id(cls, value: Any) -> Any:
        """Only JSON numbers are author ids: not true, not "1"."""
        if isinstance(value, (bool, str)):
            raise PydanticCustomError("int_type", "Input should be a valid integer")
        return value


class BookRecord(BaseModel):
    """
    A stored book.

    Create, update and delete return this shape: the row as written,
    without the author join.
    """

    id: int = Field(..., description="Unique identifier", examples=[1])
    title: str = Field(..., description="Book title")
    description: str = Field(..., description="Book description")
    author_id: int = Field(..., alias="authorId", description="Owning author ID")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Dune",
                "description": "Desert planet saga",
                "authorId": 1,
            }
        },
    )


class BookWithAuthor(BookRecord):
    """A stored book with its author's name, as returned by list and get."""

    author: AuthorName

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Dune",
                "description": "Desert planet saga",
                "authorId": 1,
                "author": {"name": "Frank Herbert"},
            }
        },
    )
