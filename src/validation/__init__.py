"""Boundary validation for transaction input."""

from src.validation.validator import (
    AMOUNT_MESSAGE,
    NOTE_MESSAGE,
    TransactionValidator,
    new_transaction_id,
    parse_amount,
)

__all__ = [
    "AMOUNT_MESSAGE",
    "NOTE_MESSAGE",
    "TransactionValidator",
    "new_transaction_id",
    "parse_amount",
]
