"""Pydantic schemas for the catalog."""

from pydantic import BaseModel


class BookCreate(BaseModel):
    """Schema for registering a book.

    ISBN is free text; neither its format nor its uniqueness is checked.
    """

    title: str = ""
    author: str = ""
    isbn: str = ""
