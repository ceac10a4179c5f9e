"""
Core Data Models for Expense Manager

These models define the schemas for all data flowing through the system:
1. Transactions as stored on the device
2. Unvalidated form input (drafts)
3. Validation results shown next to form fields
4. Derived statistics

Transactions are frozen. An edit replaces the whole transaction,
keeping its id.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class Category(str, Enum):
    """
    Supported transaction categories.

    The value is also the label shown to the user and the
    string written to storage and CSV exports.
    """
    FOOD = "Food"
    TRAVEL = "Travel"
    RENT = "Rent"
    GROCERIES = "Groceries"
    ENTERTAINMENT = "Entertainment"
    SALARY = "Salary"
    FREELANCE = "Freelance"
    OTHER = "Other"


# Categories the form offers for each transaction type.
# Both are fixed lists; a new Category must be added to one of them explicitly.
INCOME_CATEGORIES: tuple[Category, ...] = (
    Category.SALARY,
    Category.FREELANCE,
    Category.OTHER,
)
EXPENSE_CATEGORIES: tuple[Category, ...] = (
    Category.FOOD,
    Category.TRAVEL,
    Category.RENT,
    Category.GROCERIES,
    Category.ENTERTAINMENT,
)

# Sentinel for "no category filter"
ALL_CATEGORIES = "all"


def categories_for(transaction_type: TransactionType) -> tuple[Category, ...]:
    """Categories offered by the form for the given type."""
    if transaction_type == TransactionType.INCOME:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense event.

    CRITICAL: The store never validates transactions.
    Positive amounts and non-empty notes are checked by
    TransactionValidator before a Transaction is built.

    Field names match the stored JSON exactly.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique transaction ID"
    )
    amount: float = Field(
        ...,
        description="Amount in the user's currency"
    )
    category: Category = Field(
        ...,
        description="Transaction category"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    note: str = Field(
        ...,
        description="Free-text description"
    )
    date: datetime.date = Field(
        ...,
        description="Date of the transaction (YYYY-MM-DD)"
    )

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class TransactionDraft(BaseModel):
    """
    Raw input from the add/edit form.

    This is PROPOSED data, NOT verified. The amount is kept as the
    user typed it so the validator can report a field-level message
    instead of a type error.
    """

    amount: str = Field(
        default="",
        description="Amount as entered"
    )
    category: Category = Category.FOOD
    type: TransactionType = TransactionType.EXPENSE
    note: str = ""
    date: datetime.date = Field(default_factory=datetime.date.today)

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: object) -> str:
        """Number inputs hand us floats; keep everything as text."""
        if v is None:
            return ""
        return str(v)

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        """Pre-fill the form for editing an existing transaction."""
        return cls(
            amount=transaction.amount,
            category=transaction.category,
            type=transaction.type,
            note=transaction.note,
            date=transaction.date,
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'category_mismatch')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating a transaction draft."""

    is_valid: bool = Field(
        ...,
        description="True when no error-level issue was found"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_error(self) -> Optional[str]:
        """Message of the first error, for a single-line form banner."""
        for issue in self.issues:
            if issue.severity == "error":
                return issue.message
        return None

    def messages_for(self, field: str) -> list[str]:
        """All messages attached to one form field."""
        return [issue.message for issue in self.issues if issue.field == field]


# =============================================================================
# STATISTICS MODELS
# =============================================================================

class Totals(BaseModel):
    """Income, expense and balance over a set of transactions."""
    model_config = ConfigDict(frozen=True)

    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0


class CategoryTotal(BaseModel):
    """Summed expenses for one category."""
    model_config = ConfigDict(frozen=True)

    category: Category
    total: float
    share: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Fraction of all expenses (0-1)"
    )
