"""Утилиты приложения."""

from cost_tracker.utils.logger import setup_logging
from cost_tracker.utils.error_handler import ErrorHandler, get_user_message
from cost_tracker.utils.exceptions import (
    CostTrackerError,
    ValidationError,
    NotFoundError,
    RateFetchError,
    MissingRateError,
    DatabaseError,
)

__all__ = [
    "setup_logging",
    "ErrorHandler",
    "get_user_message",
    "CostTrackerError",
    "ValidationError",
    "NotFoundError",
    "RateFetchError",
    "MissingRateError",
    "DatabaseError",
]
