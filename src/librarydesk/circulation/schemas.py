"""Pydantic schemas for circulation results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class FailureKind(str, Enum):
    """Broad class of a refused request."""

    NOT_FOUND = "not_found"
    PRECONDITION_FAILED = "precondition_failed"
    CONSISTENCY_VIOLATION = "consistency_violation"


class FailureReason(str, Enum):
    """Why a circulation request was refused."""

    MEMBER_NOT_FOUND = "member_not_found"
    BOOK_NOT_FOUND = "book_not_found"
    BOOK_UNAVAILABLE = "book_unavailable"
    BORROW_LIMIT_REACHED = "borrow_limit_reached"
    OUTSTANDING_FINE = "outstanding_fine"
    NOT_BORROWED_BY_MEMBER = "not_borrowed_by_member"
    NO_FINE_DUE = "no_fine_due"
    CONSISTENCY_VIOLATION = "consistency_violation"

    @property
    def kind(self) -> FailureKind:
        """Classify the reason."""
        if self in (FailureReason.MEMBER_NOT_FOUND, FailureReason.BOOK_NOT_FOUND):
            return FailureKind.NOT_FOUND
        if self is FailureReason.CONSISTENCY_VIOLATION:
            return FailureKind.CONSISTENCY_VIOLATION
        return FailureKind.PRECONDITION_FAILED


class CirculationResult(BaseModel):
    """Common fields of every circulation outcome."""

    member_id: int
    failure: Optional[FailureReason] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        """True when the request succeeded."""
        return self.failure is None


class IssueResult(CirculationResult):
    """Outcome of issuing a book."""

    book_id: int
    record_id: Optional[int] = None
    member_name: Optional[str] = None
    book_title: Optional[str] = None
    loan_period_days: Optional[int] = None
    outstanding_fine: Optional[float] = None


class ReturnResult(CirculationResult):
    """Outcome of returning a book."""

    book_id: int
    overdue_days: int = 0
    fine_charged: float = 0.0


class FineQuote(CirculationResult):
    """Outstanding fine for a member, quoted before payment."""

    amount: float = 0.0
