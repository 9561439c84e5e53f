"""Type definitions for the CLI module."""

import time
from enum import Enum
from typing import Any, Optional


class CLIError(Exception):
    """Raised by a command for bad user input; reported with exit code 1."""

    pass


class OutputFormat(str, Enum):
    """How `status` and `projects list` render their output."""

    JSON = "json"
    TABLE = "table"


class CommandResult:
    """Outcome of a management command, rendered by ``handle_result``."""

    def __init__(
        self,
        success: bool,
        message: str = "",
        data: Optional[dict[str, Any]] = None,
        exit_code: int = 0,
    ):
        self.success = success
        self.message = message
        self.data = data or {}
        self.exit_code = exit_code

    def __bool__(self) -> bool:
        return self.success


class CLIContext:
    """Global options shared by every command through ``ctx.obj``."""

    def __init__(self, verbose: bool = False, debug: bool = False, json_logs: bool = False):
        self.verbose = verbose
        self.debug = debug
        self.json_logs = json_logs
        self._started = time.monotonic()

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self._started
