"""Directory manager for member records."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import get_config
from ..db.sqlite import Database, get_db
from .models import Member
from .schemas import MemberCreate

logger = logging.getLogger(__name__)


class Directory:
    """Owns member records, their borrowed books and fines."""

    def __init__(
        self,
        db: Optional[Database] = None,
        first_id: Optional[int] = None,
        default_max_books: Optional[int] = None,
    ):
        """Initialize directory.

        Args:
            db: Database instance
            first_id: Id given to the first member (default from config)
            default_max_books: Borrowing limit for new members (default from config)
        """
        self.db = db or get_db()
        self.first_id = first_id if first_id is not None else get_config().first_member_id
        self.default_max_books = (
            default_max_books if default_max_books is not None else get_config().max_books
        )

    def _next_id(self, s: Session) -> int:
        last = s.execute(select(func.max(Member.id))).scalar()
        return self.first_id if last is None else last + 1

    def _run(self, fn, session: Optional[Session]):
        """Run fn in the given session or a fresh one."""
        if session:
            return fn(session)
        with self.db.get_session() as s:
            result = fn(s)
            if isinstance(result, Member):
                s.expunge(result)
            return result

    # -------------------------------------------------------------------------
    # Registration and lookup
    # -------------------------------------------------------------------------

    def add_member(self, data: MemberCreate, session: Optional[Session] = None) -> Member:
        """Register a new member with no books and no fine.

        Args:
            data: Member creation data
            session: Optional session to join

        Returns:
            Created member
        """

        def _add(s: Session) -> Member:
            member = Member(
                id=self._next_id(s),
                name=data.name,
                contact=data.contact,
                max_books=data.max_books or self.default_max_books,
                fine_amount=0.0,
            )
            member.set_borrowed_books([])
            s.add(member)
            s.flush()
            logger.info("Registered member %s: %r", member.id, member.name)
            return member

        return self._run(_add, session)

    def find(self, member_id: int, session: Optional[Session] = None) -> Optional[Member]:
        """Get a member by ID.

        Returns:
            Member or None
        """
        return self._run(lambda s: s.get(Member, member_id), session)

    def list_members(self, session: Optional[Session] = None) -> list[Member]:
        """All members in ascending id order."""
        if session:
            return list(session.execute(select(Member).order_by(Member.id)).scalars().all())
        with self.db.get_session() as s:
            members = list(s.execute(select(Member).order_by(Member.id)).scalars().all())
            for member in members:
                s.expunge(member)
            return members

    def _require(self, s: Session, member_id: int) -> Member:
        member = s.get(Member, member_id)
        if not member:
            raise ValueError(f"Member {member_id} not found")
        return member

    # -------------------------------------------------------------------------
    # Borrowing
    # -------------------------------------------------------------------------

    def can_borrow(self, member_id: int, session: Optional[Session] = None) -> bool:
        """Check if a member is under their borrowing limit.

        Unknown members cannot borrow.
        """

        def _check(s: Session) -> bool:
            member = s.get(Member, member_id)
            return bool(member and member.can_borrow)

        return self._run(_check, session)

    def record_borrow(
        self, member_id: int, book_id: int, session: Optional[Session] = None
    ) -> None:
        """Add a book to a member's borrowed list.

        Raises:
            ValueError: If the member is unknown or already at their limit
        """

        def _borrow(s: Session) -> None:
            member = self._require(s, member_id)
            if not member.can_borrow:
                raise ValueError(f"Member {member_id} has reached the borrowing limit")
            member.set_borrowed_books(member.get_borrowed_books() + [book_id])
            s.flush()

        self._run(_borrow, session)

    def record_return(
        self, member_id: int, book_id: int, session: Optional[Session] = None
    ) -> bool:
        """Remove a book from a member's borrowed list.

        Returns:
            False if the member did not hold the book
        """

        def _return(s: Session) -> bool:
            member = self._require(s, member_id)
            books = member.get_borrowed_books()
            if book_id not in books:
                logger.warning("Member %s does not hold book %s", member_id, book_id)
                return False
            books.remove(book_id)
            member.set_borrowed_books(books)
            s.flush()
            return True

        return self._run(_return, session)

    # -------------------------------------------------------------------------
    # Fines
    # -------------------------------------------------------------------------

    def add_fine(
        self, member_id: int, amount: float, session: Optional[Session] = None
    ) -> float:
        """Add to a member's outstanding fine.

        Returns:
            The new outstanding total

        Raises:
            ValueError: If the amount is negative or the member is unknown
        """
        if amount < 0:
            raise ValueError("Fine amount cannot be negative")

        def _add(s: Session) -> float:
            member = self._require(s, member_id)
            member.fine_amount += amount
            s.flush()
            logger.info("Charged member %s %.2f, owes %.2f", member_id, amount, member.fine_amount)
            return member.fine_amount

        return self._run(_add, session)

    def clear_fine(self, member_id: int, session: Optional[Session] = None) -> bool:
        """Clear a member's fine.

        Returns:
            False if the member is unknown
        """

        def _clear(s: Session) -> bool:
            member = s.get(Member, member_id)
            if not member:
                return False
            member.fine_amount = 0.0
            s.flush()
            logger.info("Cleared fine for member %s", member_id)
            return True

        return self._run(_clear, session)

    def fine_of(self, member_id: int, session: Optional[Session] = None) -> Optional[float]:
        """Outstanding fine, or None for an unknown member."""

        def _fine(s: Session) -> Optional[float]:
            member = s.get(Member, member_id)
            return member.fine_amount if member else None

        return self._run(_fine, session)
