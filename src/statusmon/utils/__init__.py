"""Shared utilities for statusmon."""

from .async_utils import poll_until, run_with_timeout
from .http import use_client
from .logging import (
    LoggingContextManager,
    get_logger,
    get_structured_logger,
    setup_logging,
)
from .types import AsyncTimeoutError, UtilityError

__all__ = [
    "setup_logging",
    "get_logger",
    "get_structured_logger",
    "LoggingContextManager",
    "run_with_timeout",
    "poll_until",
    "use_client",
    "UtilityError",
    "AsyncTimeoutError",
]
