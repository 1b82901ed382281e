"""Book catalog module.

Provides functionality for:
- Registering books with sequential ids
- Looking up and listing books
- Case-insensitive title/author search
- Availability tracking for circulation
"""

from .manager import Catalog
from .models import Book
from .schemas import BookCreate

__all__ = [
    "Catalog",
    "Book",
    "BookCreate",
]
