"""Configuration management for librarydesk.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Circulation rules
    max_books: int
    loan_period_days: int
    fine_per_day: float

    # Id sequences
    first_book_id: int
    first_member_id: int

    # Logging
    log_level: str

    # Problems found while reading the environment
    load_errors: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Values that are not numbers fall back to their default and are
        reported by validate().
        """
        load_errors: list[str] = []

        def number(key: str, default, cast):
            raw = os.environ.get(key)
            if raw is None:
                return default
            try:
                return cast(raw)
            except ValueError:
                load_errors.append(f"{key} must be a number, got {raw!r}")
                return default

        return cls(
            max_books=number("LIBRARYDESK_MAX_BOOKS", 3, int),
            loan_period_days=number("LIBRARYDESK_LOAN_PERIOD_DAYS", 14, int),
            fine_per_day=number("LIBRARYDESK_FINE_PER_DAY", 1.0, float),
            first_book_id=number("LIBRARYDESK_FIRST_BOOK_ID", 1001, int),
            first_member_id=number("LIBRARYDESK_FIRST_MEMBER_ID", 1, int),
            log_level=os.environ.get("LIBRARYDESK_LOG_LEVEL", "WARNING").upper(),
            load_errors=load_errors,
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = list(self.load_errors)

        if self.max_books < 1:
            errors.append(f"max_books must be at least 1, got {self.max_books}")
        if self.loan_period_days < 0:
            errors.append(f"loan_period_days cannot be negative, got {self.loan_period_days}")
        if self.fine_per_day < 0:
            errors.append(f"fine_per_day cannot be negative, got {self.fine_per_day}")
        if self.first_book_id < 1 or self.first_member_id < 1:
            errors.append("Id sequences must start at 1 or above")
        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
