"""SQLAlchemy models for library members."""

import json

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base


class Person:
    """Identity fields shared by person-like records."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    contact: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    def describe(self) -> str:
        """One-line identity summary."""
        return f"ID: {self.id}, Name: {self.name}, Contact: {self.contact}"


class Member(Person, Base):
    """Member model - a registered borrower."""

    __tablename__ = "members"

    max_books: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    fine_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # JSON array of book ids, in borrowing order
    borrowed_books: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, name='{self.name}')>"

    def get_borrowed_books(self) -> list[int]:
        """Get borrowed book ids as list."""
        if self.borrowed_books:
            return json.loads(self.borrowed_books)
        return []

    def set_borrowed_books(self, book_ids: list[int]) -> None:
        """Set borrowed book ids from list."""
        self.borrowed_books = json.dumps(book_ids)

    @property
    def borrowed_count(self) -> int:
        """Number of books currently held."""
        return len(self.get_borrowed_books())

    @property
    def can_borrow(self) -> bool:
        """Check if the member is under the borrowing limit."""
        return self.borrowed_count < self.max_books

    @property
    def has_fine(self) -> bool:
        """Check if the member owes anything."""
        return self.fine_amount > 0
