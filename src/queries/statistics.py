"""
Statistics Aggregator

Pure functions over a list of transactions:
- totals: income, expense, balance
- category_breakdown: expense totals per category, largest first
- filter_transactions: the home screen's search box and category picker

Nothing here reads storage or mutates its input. Results depend only on
the transactions passed in, so callers may recompute them freely.
"""

from typing import Iterable, Sequence, Union

from src.models.transaction import (
    ALL_CATEGORIES,
    Category,
    CategoryTotal,
    Totals,
    Transaction,
    TransactionType,
)


def totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum income and expense amounts. Empty input gives all zeros."""
    income = 0.0
    expense = 0.0

    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        elif transaction.type == TransactionType.EXPENSE:
            expense += transaction.amount

    return Totals(income=income, expense=expense, balance=income - expense)


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """
    Expense totals per category, ordered by total descending.

    Income is ignored. Categories with equal totals keep the order in
    which they were first seen.
    """
    groups: dict[Category, float] = {}

    for transaction in transactions:
        if transaction.type != TransactionType.EXPENSE:
            continue
        groups[transaction.category] = groups.get(transaction.category, 0.0) + transaction.amount

    grand_total = sum(groups.values())

    breakdown = [
        CategoryTotal(
            category=category,
            total=total,
            share=_share(total, grand_total),
        )
        for category, total in groups.items()
    ]
    breakdown.sort(key=lambda item: item.total, reverse=True)
    return breakdown


def _share(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    # Float sums can land a hair above 1.0
    return min(max(part / whole, 0.0), 1.0)


def filter_transactions(
    transactions: Sequence[Transaction],
    search_term: str = "",
    category: Union[Category, str] = ALL_CATEGORIES,
) -> list[Transaction]:
    """
    Keep transactions matching both the category and the search term.

    category: ALL_CATEGORIES ("all") or a Category (or its value).
    search_term: case-insensitive substring of the note or the
                 category name. Empty matches everything.
    """
    term = search_term.lower()

    def matches(transaction: Transaction) -> bool:
        if category != ALL_CATEGORIES and transaction.category != category:
            return False
        return (
            term in transaction.note.lower()
            or term in transaction.category.value.lower()
        )

    return [t for t in transactions if matches(t)]
