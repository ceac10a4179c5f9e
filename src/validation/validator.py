"""
Transaction Form Validation

Runs on every add/edit submission, before anything reaches the store.
The store trusts its input and never re-validates.

Two kinds of checks:

REQUIRED FIELDS (errors, block the save):
- Amount must parse as a finite number greater than zero
- Note must contain something other than whitespace

CONSISTENCY (warnings, do not block):
- Category should be one the form offers for the chosen type

Validation NEVER silently fixes issues. It reports them so the form
can show them next to the offending field.
"""

import math
from typing import Optional
from uuid import uuid4

from src.models.transaction import (
    Transaction,
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
    categories_for,
)


AMOUNT_MESSAGE = "Please enter a valid amount."
NOTE_MESSAGE = "Please enter a note for the transaction."


def new_transaction_id() -> str:
    """Collision-resistant identifier for a new transaction."""
    return uuid4().hex


def parse_amount(raw: str) -> Optional[float]:
    """Parse form text into a finite float, or None."""
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


class TransactionValidator:
    """Validates transaction drafts and turns valid ones into Transactions."""

    def _validate_required(self, draft: TransactionDraft) -> list[ValidationIssue]:
        issues = []

        amount = parse_amount(draft.amount)
        if amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format" if draft.amount.strip() else "missing",
                message=AMOUNT_MESSAGE,
                severity="error",
                suggested_fix="Enter a number such as 12.50",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=AMOUNT_MESSAGE,
                severity="error",
                suggested_fix="Amounts are always positive; pick Income or Expense for the direction",
            ))

        if not draft.note.strip():
            issues.append(ValidationIssue(
                field="note",
                issue_type="missing",
                message=NOTE_MESSAGE,
                severity="error",
            ))

        return issues

    def _validate_consistency(self, draft: TransactionDraft) -> list[ValidationIssue]:
        issues = []

        allowed = categories_for(draft.type)
        if draft.category not in allowed:
            issues.append(ValidationIssue(
                field="category",
                issue_type="category_mismatch",
                message=(
                    f"{draft.category.value} is not usually a "
                    f"{draft.type.value} category"
                ),
                severity="warning",
                suggested_fix="Choose one of: " + ", ".join(c.value for c in allowed),
            ))

        return issues

    def validate(self, draft: TransactionDraft) -> ValidationResult:
        """
        Run all checks on a draft.

        Returns:
            ValidationResult with every issue found
        """
        issues = self._validate_required(draft)
        issues.extend(self._validate_consistency(draft))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def build(self, draft: TransactionDraft, transaction_id: str) -> Transaction:
        """
        Convert a draft that passed validation into a Transaction.

        Raises:
            ValueError: If the draft does not pass validation
        """
        result = self.validate(draft)
        if not result.is_valid:
            raise ValueError(result.first_error or "Invalid transaction")

        return Transaction(
            id=transaction_id,
            amount=parse_amount(draft.amount),
            category=draft.category,
            type=draft.type,
            note=draft.note,
            date=draft.date,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short text for a banner above the form."""
        if not result.issues:
            return "✅ Looks good."

        lines = []
        for issue in result.issues:
            marker = "❌" if issue.severity == "error" else "⚠️"
            lines.append(f"{marker} {issue.message}")
            if issue.suggested_fix:
                lines.append(f"   💡 {issue.suggested_fix}")
        return "\n".join(lines)
