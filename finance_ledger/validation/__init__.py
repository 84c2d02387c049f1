"""Command validation package."""

from finance_ledger.validation.validator import KNOWN_CATEGORIES, CommandValidator

__all__ = ["KNOWN_CATEGORIES", "CommandValidator"]
