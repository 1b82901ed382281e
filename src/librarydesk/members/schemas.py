"""Pydantic schemas for members."""

from typing import Optional

from pydantic import BaseModel, Field


class MemberCreate(BaseModel):
    """Schema for registering a member."""

    name: str = ""
    contact: str = ""
    max_books: Optional[int] = Field(None, ge=1)
