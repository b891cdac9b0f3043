"""Correlation ID logging context for tracing booking commits across modules.

Provides a commit_id-aware logger that attaches a correlation ID to every
log message, making it easy to follow one commit, cancellation or
reschedule through the validator, the policy checks and the store.

Usage:
    from slotengine.logging_context import get_commit_logger, set_commit_id

    set_commit_id("COMMIT-abc123")
    logger = get_commit_logger(__name__)
    logger.info("Validating request")  # record.commit_id == "COMMIT-abc123"
"""

import logging
import uuid
from contextvars import ContextVar

_commit_id: ContextVar[str] = ContextVar("commit_id", default="NO_COMMIT_ID")


def set_commit_id(commit_id: str) -> None:
    """Set the correlation ID for the current context."""
    _commit_id.set(commit_id)


def get_commit_id() -> str:
    """Retrieve the current correlation ID."""
    return _commit_id.get()


def new_commit_id(prefix: str = "COMMIT") -> str:
    """Generate and set a fresh correlation ID, returning it."""
    commit_id = f"{prefix}-{uuid.uuid4().hex[:8]}"
    _commit_id.set(commit_id)
    return commit_id


class CommitIdFilter(logging.Filter):
    """Injects commit_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.commit_id = _commit_id.get()  # type: ignore[attr-defined]
        return True


def get_commit_logger(name: str) -> logging.Logger:
    """Return a logger with the CommitIdFilter attached.

    The filter adds ``commit_id`` to each record so formatters can
    include ``%(commit_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, CommitIdFilter) for f in logger.filters):
        logger.addFilter(CommitIdFilter())
    return logger
