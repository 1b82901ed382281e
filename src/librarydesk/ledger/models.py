"""SQLAlchemy model for lending records."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base


def overdue_days(issued_at: datetime, until: datetime, loan_period_days: int) -> int:
    """Whole days past the loan period, never negative."""
    days_out = (until - issued_at).days
    return max(0, days_out - loan_period_days)


class LendingRecord(Base):
    """One issue of one book to one member."""

    __tablename__ = "lending_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    member_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    book_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # ISO datetimes (UTC)
    issued_at: Mapped[str] = mapped_column(String(32), nullable=False)
    returned_at: Mapped[Optional[str]] = mapped_column(String(32))
    is_returned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<LendingRecord(id={self.id}, member_id={self.member_id}, "
            f"book_id={self.book_id}, returned={self.is_returned})>"
        )

    @property
    def issue_time(self) -> datetime:
        return datetime.fromisoformat(self.issued_at)

    @property
    def return_time(self) -> Optional[datetime]:
        return datetime.fromisoformat(self.returned_at) if self.returned_at else None

    def days_overdue(self, now: datetime, loan_period_days: int = 14) -> int:
        """Days overdue as of now, or as of the return for closed records."""
        until = self.return_time if self.is_returned else now
        return overdue_days(self.issue_time, until, loan_period_days)
