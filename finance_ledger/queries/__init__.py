"""Read-only aggregates package."""

from finance_ledger.queries.summary import build_views, expense_by_category, summarize

__all__ = ["build_views", "expense_by_category", "summarize"]
