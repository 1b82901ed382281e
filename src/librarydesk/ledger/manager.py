"""Lending ledger manager."""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import get_config
from ..db.models import utc_now
from ..db.sqlite import Database, get_db
from .models import LendingRecord, overdue_days

logger = logging.getLogger(__name__)


class LendingLedger:
    """Owns the append-only sequence of lending records."""

    def __init__(
        self,
        db: Optional[Database] = None,
        clock: Optional[Callable[[], datetime]] = None,
        loan_period_days: Optional[int] = None,
    ):
        """Initialize ledger.

        Args:
            db: Database instance
            clock: Returns the current aware datetime (default: UTC now)
            loan_period_days: Grace period before a loan is overdue
        """
        self.db = db or get_db()
        self.clock = clock or utc_now
        self.loan_period_days = (
            loan_period_days if loan_period_days is not None else get_config().loan_period_days
        )

    def _next_id(self, s: Session) -> int:
        last = s.execute(select(func.max(LendingRecord.id))).scalar()
        return 1 if last is None else last + 1

    def open_record(
        self, member_id: int, book_id: int, session: Optional[Session] = None
    ) -> int:
        """Append an unreturned record stamped with the current time.

        Returns:
            The new record id
        """

        def _open(s: Session) -> int:
            record = LendingRecord(
                id=self._next_id(s),
                member_id=member_id,
                book_id=book_id,
                issued_at=self.clock().isoformat(),
                returned_at=None,
                is_returned=False,
            )
            s.add(record)
            s.flush()
            logger.info("Opened record %s: book %s to member %s", record.id, book_id, member_id)
            return record.id

        if session:
            return _open(session)
        with self.db.get_session() as s:
            return _open(s)

    def close_record(
        self, member_id: int, book_id: int, session: Optional[Session] = None
    ) -> Optional[int]:
        """Mark the latest open record for the pair as returned.

        Args:
            member_id: Member returning the book
            book_id: Book being returned
            session: Optional session to join

        Returns:
            Days overdue, or None if the pair has no open record
        """

        def _close(s: Session) -> Optional[int]:
            stmt = (
                select(LendingRecord)
                .where(
                    LendingRecord.member_id == member_id,
                    LendingRecord.book_id == book_id,
                    LendingRecord.is_returned.is_(False),
                )
                .order_by(LendingRecord.id.desc())
                .limit(1)
            )
            record = s.execute(stmt).scalar_one_or_none()
            if not record:
                return None

            now = self.clock()
            record.is_returned = True
            record.returned_at = now.isoformat()
            s.flush()

            days = overdue_days(record.issue_time, now, self.loan_period_days)
            logger.info("Closed record %s, %d day(s) overdue", record.id, days)
            return days

        if session:
            return _close(session)
        with self.db.get_session() as s:
            return _close(s)

    def list_records(
        self,
        member_id: Optional[int] = None,
        book_id: Optional[int] = None,
        open_only: bool = False,
        session: Optional[Session] = None,
    ) -> list[LendingRecord]:
        """List records with optional filters.

        Args:
            member_id: Filter by member
            book_id: Filter by book
            open_only: Only return unreturned records
            session: Optional session to join

        Returns:
            Records in ascending id order
        """

        def _list(s: Session) -> list[LendingRecord]:
            stmt = select(LendingRecord)
            if member_id is not None:
                stmt = stmt.where(LendingRecord.member_id == member_id)
            if book_id is not None:
                stmt = stmt.where(LendingRecord.book_id == book_id)
            if open_only:
                stmt = stmt.where(LendingRecord.is_returned.is_(False))
            stmt = stmt.order_by(LendingRecord.id)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _list(session)
        with self.db.get_session() as s:
            records = _list(s)
            for record in records:
                s.expunge(record)
            return records

    def days_overdue(self, record: LendingRecord) -> int:
        """Days overdue for a record as of the ledger clock."""
        return record.days_overdue(self.clock(), self.loan_period_days)
