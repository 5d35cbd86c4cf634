"""
Author Pydantic Schemas

Authors are only ever shown nested inside a book, and then only by name.
"""

from pydantic import BaseModel, ConfigDict, Field


class AuthorName(BaseModel):
    """
    The part of an author included in book responses.

    model_config with from_attributes=True allows creating this schema
    straight from an Author model instance.
    """

    name: str = Field(
        ...,
        description="Author's full name",
        examples=["Frank Herbert"],
    )

    model_config = ConfigDict(from_attributes=True)
