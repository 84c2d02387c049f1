"""Activity logging package."""

from finance_ledger.activity.logger import (
    ActivityEvent,
    ActivityLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["ActivityEvent", "ActivityLogger", "configure_logging", "create_correlation_id"]
