"""
Errors and error logging for factedit.

Logs full stack traces for debugging while the CLI shows clean messages.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path


class FactEditError(Exception):
    """Base class for factedit errors."""


class ReadOnlySessionError(FactEditError):
    """Commit attempted on a session opened read only."""


class SessionClosedError(FactEditError):
    """Commit attempted after the session was committed or discarded."""


class FactNotFoundError(FactEditError):
    """No fact with the requested id in the store."""

    def __init__(self, fact_id: str):
        super().__init__(f"Fact not found: {fact_id}")
        self.fact_id = fact_id


def _error_log_path() -> Path:
    """Resolve error log path, respecting FACTEDIT_STORE_PATH."""
    store = os.environ.get("FACTEDIT_STORE_PATH")
    if store:
        return Path(store) / "factedit-errors.log"
    return Path.home() / ".factedit" / "factedit-errors.log"


def log_exception(exc: Exception, context: str = "") -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # the error log itself is best-effort
    return log_path
