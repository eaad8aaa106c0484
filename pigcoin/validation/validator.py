"""
Boundary Input Validation

DESIGN DECISION: Everything typed by a user arrives here first.
Amounts come in as text from a keypad that may use a comma as the
decimal separator ("12,50"), so they are normalized and parsed into
Decimal before the ledger ever sees them.

IMPORTANT: Validation NEVER silently fixes values. A value that does
not parse, is not finite, or is not positive is rejected, and the
ledger is left untouched.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pigcoin.models.finance import GoalType, TransactionType

AmountInput = Union[str, int, float, Decimal]

MAX_NAME_LENGTH = 200


class InvalidInputError(ValueError):
    """Input rejected at the boundary, before any state change."""
    
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class InvalidAmountError(InvalidInputError):
    """An amount that does not parse or is out of range."""
    pass


class InvalidNameError(InvalidInputError):
    """An empty or oversized label."""
    pass


def _to_decimal(raw: AmountInput, field: str) -> Decimal:
    if isinstance(raw, bool):
        raise InvalidAmountError(field, f"{field} must be a number")
    
    if isinstance(raw, Decimal):
        amount = raw
    elif isinstance(raw, int):
        amount = Decimal(raw)
    elif isinstance(raw, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1
        amount = Decimal(str(raw))
    elif isinstance(raw, str):
        text = raw.strip().replace(",", ".")
        if not text:
            raise InvalidAmountError(field, f"{field} is required")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(field, f"{field} is not a valid number: {raw!r}")
    else:
        raise InvalidAmountError(field, f"{field} must be a number")
    
    if not amount.is_finite():
        raise InvalidAmountError(field, f"{field} must be a finite number")
    return amount


def parse_amount(raw: AmountInput, field: str = "value") -> Decimal:
    """
    Parse a strictly positive monetary amount.
    
    Accepts Decimal, int, float or text with either "." or "," as the
    decimal separator.
    
    Raises:
        InvalidAmountError: If the value is missing, malformed or <= 0
    """
    amount = _to_decimal(raw, field)
    if amount <= 0:
        raise InvalidAmountError(field, f"{field} must be greater than zero")
    return amount


def parse_delta(raw: AmountInput, field: str = "delta") -> Decimal:
    """Parse a signed adjustment (deposits are positive, withdrawals negative)."""
    return _to_decimal(raw, field)


def validate_name(raw: Optional[str], field: str = "name") -> str:
    """Strip a label and make sure something is left."""
    if raw is None or not isinstance(raw, str):
        raise InvalidNameError(field, f"{field} is required")
    name = raw.strip()
    if not name:
        raise InvalidNameError(field, f"{field} cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            field, f"{field} must be at most {MAX_NAME_LENGTH} characters"
        )
    return name


def validate_transaction_input(
    name: Optional[str],
    value: AmountInput,
    transaction_type: Union[str, TransactionType],
) -> tuple[str, Decimal, TransactionType]:
    """
    Validate everything needed to add a transaction.
    
    Returns:
        (name, value, type) ready for the ledger
    """
    clean_name = validate_name(name)
    amount = parse_amount(value, "value")
    try:
        kind = TransactionType(transaction_type)
    except ValueError:
        raise InvalidInputError("type", f"Unknown transaction type: {transaction_type!r}")
    return clean_name, amount, kind


def validate_goal_input(
    name: Optional[str],
    total_value: AmountInput,
    goal_type: Union[str, GoalType] = GoalType.GRID,
    installment_value: Optional[AmountInput] = None,
) -> tuple[str, Decimal, GoalType, Optional[Decimal]]:
    """
    Validate everything needed to create a goal.
    
    FIXED goals need a positive installment value. Other kinds
    ignore it.
    
    Returns:
        (name, total_value, type, installment_value)
    """
    clean_name = validate_name(name)
    total = parse_amount(total_value, "total_value")
    try:
        kind = GoalType(goal_type)
    except ValueError:
        raise InvalidInputError("type", f"Unknown goal type: {goal_type!r}")
    
    unit = None
    if kind == GoalType.FIXED:
        if installment_value is None:
            raise InvalidAmountError(
                "installment_value", "installment_value is required for fixed goals"
            )
        unit = parse_amount(installment_value, "installment_value")
    
    return clean_name, total, kind, unit
