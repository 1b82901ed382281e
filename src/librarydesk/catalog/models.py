"""SQLAlchemy model for catalog books."""

from typing import Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base


class Book(Base):
    """Book model - one physical copy in the catalog."""

    __tablename__ = "books"

    # Assigned by Catalog, starting at 1001
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    author: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    isbn: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    # Circulation state; borrowed_by is set iff the book is out
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    borrowed_by: Mapped[Optional[int]] = mapped_column(Integer, index=True)

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', available={self.is_available})>"

    def matches(self, query: str) -> bool:
        """Check if query is a case-insensitive substring of title or author."""
        needle = query.lower()
        return needle in self.title.lower() or needle in self.author.lower()
