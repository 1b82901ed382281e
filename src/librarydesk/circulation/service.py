"""Circulation service: business rules for lending books to members."""

import logging
from datetime import datetime
from typing import Callable, Optional

from ..catalog.manager import Catalog
from ..catalog.models import Book
from ..catalog.schemas import BookCreate
from ..config import Config, get_config
from ..db.sqlite import Database, get_db
from ..ledger.manager import LendingLedger
from ..ledger.models import LendingRecord
from ..members.manager import Directory
from ..members.models import Member
from ..members.schemas import MemberCreate
from .schemas import FailureReason, FineQuote, IssueResult, ReturnResult

logger = logging.getLogger(__name__)


class CirculationService:
    """Issues and returns books, charges and quotes fines.

    Every mutating request runs in a single database session, so the catalog,
    directory and ledger changes it makes are committed or rolled back together.
    Refusals are reported through the result's ``failure`` field.
    """

    def __init__(
        self,
        db: Optional[Database] = None,
        config: Optional[Config] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize circulation service.

        Args:
            db: Database instance
            config: Circulation rules (default: global config)
            clock: Current-time source for the ledger
        """
        self.db = db or get_db()
        self.config = config or get_config()
        self.catalog = Catalog(self.db, first_id=self.config.first_book_id)
        self.directory = Directory(
            self.db,
            first_id=self.config.first_member_id,
            default_max_books=self.config.max_books,
        )
        self.ledger = LendingLedger(
            self.db, clock=clock, loan_period_days=self.config.loan_period_days
        )

    # -------------------------------------------------------------------------
    # Registration and lookup
    # -------------------------------------------------------------------------

    def add_book(self, title: str, author: str, isbn: str) -> int:
        """Register a book and return its id."""
        return self.catalog.add_book(BookCreate(title=title, author=author, isbn=isbn)).id

    def add_member(self, name: str, contact: str, max_books: Optional[int] = None) -> int:
        """Register a member and return their id."""
        data = MemberCreate(name=name, contact=contact, max_books=max_books)
        return self.directory.add_member(data).id

    def get_book(self, book_id: int) -> Optional[Book]:
        return self.catalog.find(book_id)

    def get_member(self, member_id: int) -> Optional[Member]:
        return self.directory.find(member_id)

    def list_books(self) -> list[Book]:
        return self.catalog.list_books()

    def list_members(self) -> list[Member]:
        return self.directory.list_members()

    def list_records(
        self,
        member_id: Optional[int] = None,
        book_id: Optional[int] = None,
        open_only: bool = False,
    ) -> list[LendingRecord]:
        return self.ledger.list_records(member_id=member_id, book_id=book_id, open_only=open_only)

    def search_books(self, query: str) -> list[Book]:
        """Case-insensitive title/author search."""
        return self.catalog.search(query)

    # -------------------------------------------------------------------------
    # Circulation
    # -------------------------------------------------------------------------

    def issue_book(self, member_id: int, book_id: int) -> IssueResult:
        """Lend a book to a member.

        Rules are checked in a fixed order and the first one that fails is
        reported: member exists, book exists, book is available, member is
        under their limit, member owes nothing.

        Args:
            member_id: Borrowing member
            book_id: Requested book

        Returns:
            IssueResult with the new record id, or the failure reason
        """
        with self.db.get_session() as session:
            member = self.directory.find(member_id, session=session)
            if not member:
                return self._refuse_issue(member_id, book_id, FailureReason.MEMBER_NOT_FOUND)

            book = self.catalog.find(book_id, session=session)
            if not book:
                return self._refuse_issue(member_id, book_id, FailureReason.BOOK_NOT_FOUND)

            if not book.is_available:
                return self._refuse_issue(member_id, book_id, FailureReason.BOOK_UNAVAILABLE)

            if not member.can_borrow:
                return self._refuse_issue(member_id, book_id, FailureReason.BORROW_LIMIT_REACHED)

            if member.has_fine:
                return self._refuse_issue(
                    member_id,
                    book_id,
                    FailureReason.OUTSTANDING_FINE,
                    outstanding_fine=member.fine_amount,
                )

            self.catalog.set_availability(book_id, False, member_id, session=session)
            self.directory.record_borrow(member_id, book_id, session=session)
            record_id = self.ledger.open_record(member_id, book_id, session=session)

            logger.info("Issued book %s to member %s (record %s)", book_id, member_id, record_id)
            return IssueResult(
                member_id=member_id,
                book_id=book_id,
                record_id=record_id,
                member_name=member.name,
                book_title=book.title,
                loan_period_days=self.config.loan_period_days,
                message="Book issued successfully",
            )

    def return_book(self, member_id: int, book_id: int) -> ReturnResult:
        """Take a book back from a member and charge any overdue fine.

        Args:
            member_id: Returning member
            book_id: Returned book

        Returns:
            ReturnResult with overdue days and fine charged, or the failure reason
        """
        with self.db.get_session() as session:
            member = self.directory.find(member_id, session=session)
            if not member:
                return self._refuse_return(member_id, book_id, FailureReason.MEMBER_NOT_FOUND)

            book = self.catalog.find(book_id, session=session)
            if not book:
                return self._refuse_return(member_id, book_id, FailureReason.BOOK_NOT_FOUND)

            if book.is_available or book.borrowed_by != member_id:
                return self._refuse_return(
                    member_id, book_id, FailureReason.NOT_BORROWED_BY_MEMBER
                )

            if book_id not in member.get_borrowed_books():
                return self._inconsistent(
                    member_id, book_id, "Member record does not list this book as borrowed"
                )

            days = self.ledger.close_record(member_id, book_id, session=session)
            if days is None:
                return self._inconsistent(
                    member_id, book_id, "No open lending record for this book and member"
                )

            fine = days * self.config.fine_per_day

            self.catalog.set_availability(book_id, True, None, session=session)
            self.directory.record_return(member_id, book_id, session=session)
            if days > 0:
                self.directory.add_fine(member_id, fine, session=session)

            logger.info(
                "Member %s returned book %s, %d day(s) overdue, fine %.2f",
                member_id,
                book_id,
                days,
                fine,
            )
            return ReturnResult(
                member_id=member_id,
                book_id=book_id,
                overdue_days=days,
                fine_charged=fine,
                message="Book returned successfully",
            )

    # -------------------------------------------------------------------------
    # Fines
    # -------------------------------------------------------------------------

    def pay_fine(self, member_id: int) -> FineQuote:
        """Quote a member's outstanding fine.

        Nothing is cleared here; call clear_fine once payment is confirmed.
        """
        fine = self.directory.fine_of(member_id)
        if fine is None:
            return FineQuote(
                member_id=member_id,
                failure=FailureReason.MEMBER_NOT_FOUND,
                message="Member not found",
            )
        if fine <= 0:
            return FineQuote(
                member_id=member_id,
                failure=FailureReason.NO_FINE_DUE,
                message="No pending fine",
            )
        return FineQuote(member_id=member_id, amount=fine)

    def clear_fine(self, member_id: int) -> bool:
        """Clear a member's fine after payment.

        Returns:
            False if the member is unknown
        """
        return self.directory.clear_fine(member_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _refuse_issue(
        self,
        member_id: int,
        book_id: int,
        reason: FailureReason,
        outstanding_fine: Optional[float] = None,
    ) -> IssueResult:
        logger.warning("Refused to issue book %s to member %s: %s", book_id, member_id, reason.value)
        return IssueResult(
            member_id=member_id,
            book_id=book_id,
            failure=reason,
            message=_MESSAGES[reason],
            outstanding_fine=outstanding_fine,
        )

    def _inconsistent(self, member_id: int, book_id: int, message: str) -> ReturnResult:
        logger.error("Book %s is out to member %s but %s", book_id, member_id, message.lower())
        return ReturnResult(
            member_id=member_id,
            book_id=book_id,
            failure=FailureReason.CONSISTENCY_VIOLATION,
            message=message,
        )

    def _refuse_return(
        self, member_id: int, book_id: int, reason: FailureReason
    ) -> ReturnResult:
        logger.warning("Refused return of book %s by member %s: %s", book_id, member_id, reason.value)
        return ReturnResult(
            member_id=member_id,
            book_id=book_id,
            failure=reason,
            message=_MESSAGES[reason],
        )


_MESSAGES = {
    FailureReason.MEMBER_NOT_FOUND: "Member not found",
    FailureReason.BOOK_NOT_FOUND: "Book not found",
    FailureReason.BOOK_UNAVAILABLE: "Book is currently borrowed",
    FailureReason.BORROW_LIMIT_REACHED: "Member has reached maximum borrowing limit",
    FailureReason.OUTSTANDING_FINE: "Member has a pending fine",
    FailureReason.NOT_BORROWED_BY_MEMBER: "This book was not borrowed by this member",
}
