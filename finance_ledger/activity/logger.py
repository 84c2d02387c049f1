"""
Activity Logger

DESIGN DECISION: Every command outcome is written as one structured
log event. This provides:
1. Debugging capability when a balance looks wrong
2. A visible trace of rejected commands and storage failures
3. Correlation ids to tie a command to its result

The log is local diagnostics only; it is not a persisted audit trail.
"""

import logging
import sys
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

import structlog


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOGGER_NAME = "finance_ledger"


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (which structlog renders into) to stderr."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    logging.getLogger(LOGGER_NAME).setLevel(level.upper())


class ActivityEvent(str, Enum):
    """Types of events we log."""
    STATE_LOADED = "state_loaded"
    STATE_LOAD_FAILED = "state_load_failed"
    STATE_PRESERVED = "unreadable_state_preserved"
    COMMAND_SUCCEEDED = "command_succeeded"
    COMMAND_REJECTED = "command_rejected"
    PERSISTENCE_FAILED = "persistence_failed"
    OBSERVER_FAILED = "observer_failed"


class ActivityLogger:
    """
    Central structured logging for ledger commands.

    A fresh logger proxy is fetched per event so that logging
    configuration changes (and test capture) are always honoured.
    """

    def __init__(self, name: str = LOGGER_NAME):
        self._name = name

    @property
    def _logger(self):
        return structlog.get_logger(self._name)

    def log_state_loaded(
        self,
        storage_key: str,
        schema_version: int,
        record_count: int,
    ) -> None:
        """Log a snapshot read from storage."""
        self._logger.info(
            ActivityEvent.STATE_LOADED.value,
            storage_key=storage_key,
            schema_version=schema_version,
            record_count=record_count,
        )

    def log_state_load_failed(self, storage_key: str, error_message: str) -> None:
        """Log a snapshot that could not be read; the ledger starts empty."""
        self._logger.error(
            ActivityEvent.STATE_LOAD_FAILED.value,
            storage_key=storage_key,
            error=error_message,
        )

    def log_state_preserved(self, storage_key: str, backup_key: str) -> None:
        """Log an unparseable snapshot copied aside before starting empty."""
        self._logger.warning(
            ActivityEvent.STATE_PRESERVED.value,
            storage_key=storage_key,
            backup_key=backup_key,
        )

    def log_command_succeeded(
        self,
        command: str,
        command_id: UUID,
        record_id: Optional[str] = None,
        warnings: Optional[list[str]] = None,
    ) -> None:
        """Log a command that was applied and persisted."""
        self._logger.info(
            ActivityEvent.COMMAND_SUCCEEDED.value,
            command=command,
            command_id=str(command_id),
            record_id=record_id,
            warnings=warnings or [],
        )

    def log_command_rejected(
        self,
        command: str,
        command_id: UUID,
        error_kind: str,
        error_message: str,
    ) -> None:
        """Log a command rejected before any mutation."""
        self._logger.warning(
            ActivityEvent.COMMAND_REJECTED.value,
            command=command,
            command_id=str(command_id),
            error_kind=error_kind,
            error=error_message,
        )

    def log_persistence_failed(
        self,
        command: str,
        command_id: UUID,
        error_message: str,
    ) -> None:
        """Log a command whose snapshot could not be saved (state kept as before)."""
        self._logger.error(
            ActivityEvent.PERSISTENCE_FAILED.value,
            command=command,
            command_id=str(command_id),
            error=error_message,
        )

    def log_observer_failed(self, observer: str, error_message: str) -> None:
        """Log a view callback that raised while being notified."""
        self._logger.error(
            ActivityEvent.OBSERVER_FAILED.value,
            observer=observer,
            error=error_message,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for one command.

    The same id is put on the CommandResult and on the log event.
    """
    return uuid4()
