"""Tests for boundary input validation."""

import pytest
from decimal import Decimal

from pigcoin.models.finance import GoalType, TransactionType
from pigcoin.validation import (
    InvalidAmountError,
    InvalidInputError,
    InvalidNameError,
    parse_amount,
    parse_delta,
    validate_goal_input,
    validate_name,
    validate_transaction_input,
)


class TestParseAmount:
    """Tests for parse_amount."""
    
    @pytest.mark.parametrize("raw,expected", [
        ("12,50", Decimal("12.50")),
        ("12.50", Decimal("12.50")),
        ("  7 ", Decimal("7")),
        (3, Decimal("3")),
        (0.1, Decimal("0.1")),
        (Decimal("9.99"), Decimal("9.99")),
    ])
    def test_accepts(self, raw, expected):
        assert parse_amount(raw) == expected
    
    @pytest.mark.parametrize("raw", [
        "", "   ", "abc", "1.2.3", "0", "0,00", "-3", "NaN", "Infinity", True, None,
    ])
    def test_rejects(self, raw):
        with pytest.raises(InvalidAmountError):
            parse_amount(raw)
    
    def test_error_carries_field(self):
        with pytest.raises(InvalidAmountError) as exc:
            parse_amount("x", "total_value")
        assert exc.value.field == "total_value"
        assert isinstance(exc.value, ValueError)


class TestParseDelta:
    """Tests for signed adjustments."""
    
    def test_negative_allowed(self):
        assert parse_delta("-10,5") == Decimal("-10.5")
    
    def test_non_finite_rejected(self):
        with pytest.raises(InvalidAmountError):
            parse_delta("-inf")


class TestValidateName:
    """Tests for validate_name."""
    
    def test_strips(self):
        assert validate_name("  Rent  ") == "Rent"
    
    @pytest.mark.parametrize("raw", [None, "", "   ", "x" * 201])
    def test_rejects(self, raw):
        with pytest.raises(InvalidNameError):
            validate_name(raw)


class TestCompositeValidators:
    """Tests for the per-operation validators."""
    
    def test_transaction_input(self):
        assert validate_transaction_input(" Pay ", "100", "income") == (
            "Pay", Decimal("100"), TransactionType.INCOME,
        )
    
    def test_unknown_transaction_type(self):
        with pytest.raises(InvalidInputError) as exc:
            validate_transaction_input("Pay", "100", "transfer")
        assert exc.value.field == "type"
    
    def test_goal_input_ignores_unit_for_grid(self):
        assert validate_goal_input("Trip", "10", "grid", "3") == (
            "Trip", Decimal("10"), GoalType.GRID, None,
        )
    
    def test_fixed_goal_needs_unit(self):
        with pytest.raises(InvalidAmountError) as exc:
            validate_goal_input("Car", "100", GoalType.FIXED)
        assert exc.value.field == "installment_value"
        with pytest.raises(InvalidAmountError):
            validate_goal_input("Car", "100", GoalType.FIXED, "0")
    
    def test_fixed_goal_unit(self):
        _, _, kind, unit = validate_goal_input("Car", "100", "fixed", "12,5")
        assert kind == GoalType.FIXED
        assert unit == Decimal("12.5")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
