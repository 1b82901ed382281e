"""Catalog manager for book records."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import get_config
from ..db.sqlite import Database, get_db
from .models import Book
from .schemas import BookCreate

logger = logging.getLogger(__name__)


class Catalog:
    """Owns book records and their availability."""

    def __init__(self, db: Optional[Database] = None, first_id: Optional[int] = None):
        """Initialize catalog.

        Args:
            db: Database instance
            first_id: Id given to the first book (default from config)
        """
        self.db = db or get_db()
        self.first_id = first_id if first_id is not None else get_config().first_book_id

    def _next_id(self, s: Session) -> int:
        # Books are never deleted, so the highest id is the last one issued
        last = s.execute(select(func.max(Book.id))).scalar()
        return self.first_id if last is None else last + 1

    def add_book(self, data: BookCreate, session: Optional[Session] = None) -> Book:
        """Register a new, available book.

        Args:
            data: Book creation data
            session: Optional session to join

        Returns:
            Created book
        """

        def _add(s: Session) -> Book:
            book = Book(
                id=self._next_id(s),
                title=data.title,
                author=data.author,
                isbn=data.isbn,
                is_available=True,
                borrowed_by=None,
            )
            s.add(book)
            s.flush()
            logger.info("Added book %s: %r by %r", book.id, book.title, book.author)
            return book

        if session:
            return _add(session)
        with self.db.get_session() as s:
            book = _add(s)
            s.expunge(book)
            return book

    def find(self, book_id: int, session: Optional[Session] = None) -> Optional[Book]:
        """Get a book by ID.

        Returns:
            Book or None
        """

        def _get(s: Session) -> Optional[Book]:
            return s.get(Book, book_id)

        if session:
            return _get(session)
        with self.db.get_session() as s:
            book = _get(s)
            if book:
                s.expunge(book)
            return book

    def list_books(self, session: Optional[Session] = None) -> list[Book]:
        """All books in ascending id order."""

        def _list(s: Session) -> list[Book]:
            return list(s.execute(select(Book).order_by(Book.id)).scalars().all())

        if session:
            return _list(session)
        with self.db.get_session() as s:
            books = _list(s)
            for book in books:
                s.expunge(book)
            return books

    def search(self, query: str, session: Optional[Session] = None) -> list[Book]:
        """Search books by title or author.

        A plain lowercase substring test, not tokenized or ranked. Results
        keep catalog order.

        Args:
            query: Text to look for
            session: Optional session to join

        Returns:
            Matching books, empty when nothing matches
        """
        return [book for book in self.list_books(session) if book.matches(query)]

    def count(self, session: Optional[Session] = None) -> int:
        """Number of books in the catalog."""

        def _count(s: Session) -> int:
            return s.execute(select(func.count()).select_from(Book)).scalar() or 0

        if session:
            return _count(session)
        with self.db.get_session() as s:
            return _count(s)

    def set_availability(
        self,
        book_id: int,
        available: bool,
        borrower_id: Optional[int] = None,
        session: Optional[Session] = None,
    ) -> Book:
        """Mark a book as available or borrowed.

        Args:
            book_id: Book ID (must exist)
            available: New availability
            borrower_id: Member holding the book; required when not available
            session: Optional session to join

        Returns:
            Updated book

        Raises:
            ValueError: If the book does not exist or the borrower does not
                agree with the availability
        """
        if available == (borrower_id is not None):
            raise ValueError("A borrower must be given exactly when the book is unavailable")

        def _set(s: Session) -> Book:
            book = s.get(Book, book_id)
            if not book:
                raise ValueError(f"Book {book_id} not found")
            book.is_available = available
            book.borrowed_by = borrower_id
            s.flush()
            return book

        if session:
            return _set(session)
        with self.db.get_session() as s:
            book = _set(s)
            s.expunge(book)
            return book
