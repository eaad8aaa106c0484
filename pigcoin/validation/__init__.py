"""Boundary validation package."""

from pigcoin.validation.validator import (
    AmountInput,
    InvalidAmountError,
    InvalidInputError,
    InvalidNameError,
    parse_amount,
    parse_delta,
    validate_goal_input,
    validate_name,
    validate_transaction_input,
)

__all__ = [
    "AmountInput",
    "InvalidAmountError",
    "InvalidInputError",
    "InvalidNameError",
    "parse_amount",
    "parse_delta",
    "validate_goal_input",
    "validate_name",
    "validate_transaction_input",
]
