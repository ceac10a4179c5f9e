"""Tests for transaction form validation."""

from datetime import date

import pytest

from src.models.transaction import Category, TransactionDraft, TransactionType
from src.validation import (
    AMOUNT_MESSAGE,
    NOTE_MESSAGE,
    TransactionValidator,
    new_transaction_id,
    parse_amount,
)


@pytest.fixture
def validator():
    return TransactionValidator()


def draft(**overrides):
    fields = {
        "amount": "12.50",
        "category": Category.FOOD,
        "type": TransactionType.EXPENSE,
        "note": "Lunch",
        "date": date(2024, 5, 2),
    }
    fields.update(overrides)
    return TransactionDraft(**fields)


class TestParseAmount:

    @pytest.mark.parametrize("raw, expected", [
        ("12.5", 12.5),
        (" 3 ", 3.0),
        ("-4", -4.0),
        ("1e3", 1000.0),
    ])
    def test_numbers(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "12,50", "nan", "inf"])
    def test_not_numbers(self, raw):
        assert parse_amount(raw) is None


class TestRequiredFields:

    def test_valid_draft(self, validator):
        result = validator.validate(draft())
        assert result.is_valid is True
        assert result.issues == []

    @pytest.mark.parametrize("amount, issue_type", [
        ("", "missing"),
        ("  ", "missing"),
        ("twelve", "invalid_format"),
        ("NaN", "invalid_format"),
        ("0", "invalid_value"),
        ("-5", "invalid_value"),
    ])
    def test_bad_amounts(self, validator, amount, issue_type):
        result = validator.validate(draft(amount=amount))

        assert result.is_valid is False
        assert result.first_error == AMOUNT_MESSAGE
        assert result.issues[0].issue_type == issue_type

    @pytest.mark.parametrize("note", ["", "   ", "\t\n"])
    def test_blank_note(self, validator, note):
        result = validator.validate(draft(note=note))

        assert result.is_valid is False
        assert result.messages_for("note") == [NOTE_MESSAGE]

    def test_amount_reported_before_note(self, validator):
        result = validator.validate(draft(amount="", note=""))
        assert result.error_count == 2
        assert result.first_error == AMOUNT_MESSAGE


class TestConsistency:

    def test_category_mismatch_is_only_a_warning(self, validator):
        result = validator.validate(draft(type=TransactionType.INCOME, category=Category.FOOD))

        assert result.is_valid is True
        assert result.has_errors is False
        assert result.messages_for("category") == ["Food is not usually a income category"]

    def test_matching_category_has_no_warning(self, validator):
        result = validator.validate(draft(type=TransactionType.INCOME, category=Category.SALARY))
        assert result.issues == []


class TestBuild:

    def test_build_assigns_id_and_parses_amount(self, validator):
        tx = validator.build(draft(note="  Lunch  "), transaction_id="abc")

        assert tx.id == "abc"
        assert tx.amount == 12.5
        assert tx.note == "  Lunch  "
        assert tx.date == date(2024, 5, 2)
        assert tx.type == TransactionType.EXPENSE

    def test_build_rejects_invalid(self, validator):
        with pytest.raises(ValueError, match="valid amount"):
            validator.build(draft(amount="0"), transaction_id="abc")

    def test_summary(self, validator):
        ok = validator.get_user_friendly_summary(validator.validate(draft()))
        bad = validator.get_user_friendly_summary(validator.validate(draft(note="")))

        assert ok.startswith("✅")
        assert NOTE_MESSAGE in bad


class TestIds:

    def test_ids_are_unique(self):
        ids = {new_transaction_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_ids_are_non_empty_strings(self):
        assert isinstance(new_transaction_id(), str)
        assert new_transaction_id()
