"""Lending ledger module.

Append-only history of issue and return events, used to work out how long
a book was out and how many days overdue it came back.
"""

from .manager import LendingLedger
from .models import LendingRecord

__all__ = [
    "LendingLedger",
    "LendingRecord",
]
