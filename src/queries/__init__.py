"""Statistics and filtering over transactions."""

from src.queries.statistics import category_breakdown, filter_transactions, totals

__all__ = ["category_breakdown", "filter_transactions", "totals"]
