"""Circulation module.

Orchestrates issue, return, search and fine payment across the catalog,
the member directory and the lending ledger.
"""

from .schemas import (
    FailureKind,
    FailureReason,
    FineQuote,
    IssueResult,
    ReturnResult,
)
from .service import CirculationService

__all__ = [
    "CirculationService",
    "FailureKind",
    "FailureReason",
    "FineQuote",
    "IssueResult",
    "ReturnResult",
]
