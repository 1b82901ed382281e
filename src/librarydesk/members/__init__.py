"""Member directory module.

Provides functionality for:
- Registering members with sequential ids
- Borrowed book tracking against a per-member limit
- Fine accounting
"""

from .manager import Directory
from .models import Member, Person
from .schemas import MemberCreate

__all__ = [
    "Directory",
    "Member",
    "Person",
    "MemberCreate",
]
