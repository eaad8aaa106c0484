"""
Installment Schedule Generation

A schedule partitions a goal's target amount into numbered installments
whose values add up to the target.

GRID: installment k costs k units (1, 2, 3, ...). The triangular sum
n(n+1)/2 approaches the target from below, and one remainder slot makes
up the difference. Small amounts come first, larger ones near the end.

FIXED: as many installments of the chosen unit as fit, plus a remainder
slot rounded to cents. Remainders of a cent or less are dropped.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from pigcoin.models.finance import GoalType, Installment
from pigcoin.validation.validator import InvalidAmountError

CENTS = Decimal("0.01")

# Remainders at or below this are rounding noise, not an installment
REMAINDER_TOLERANCE = Decimal("0.01")

MAX_INSTALLMENTS = 10_000


class ScheduleTooLargeError(InvalidAmountError):
    """The requested schedule would have an unreasonable number of slots."""
    pass


def triangular(n: int) -> int:
    return n * (n + 1) // 2


def grid_size(total_value: Decimal) -> int:
    """
    Number of increasing installments for a grid goal.
    
    Starts from floor(sqrt(2 * total)) and steps down while the
    triangular sum would overshoot the target, so the remainder slot
    is never negative.
    """
    # floor(sqrt(x)) == isqrt(floor(x)), exact at any magnitude
    n = math.isqrt(int(2 * total_value))
    while n > 0 and triangular(n) > total_value:
        n -= 1
    return n


def grid_schedule(total_value: Decimal) -> tuple[Installment, ...]:
    """Build the triangular schedule for a grid goal."""
    if 2 * total_value >= (MAX_INSTALLMENTS + 1) ** 2:
        raise ScheduleTooLargeError(
            "total_value",
            f"A grid of {total_value} needs more than {MAX_INSTALLMENTS} installments",
        )
    n = grid_size(total_value)
    if n + 1 > MAX_INSTALLMENTS:
        raise ScheduleTooLargeError(
            "total_value",
            f"A grid of {total_value} needs {n} installments (max {MAX_INSTALLMENTS})",
        )
    
    installments = [
        Installment(number=k, value=Decimal(k)) for k in range(1, n + 1)
    ]
    
    remainder = total_value - triangular(n)
    if remainder > 0:
        installments.append(Installment(number=n + 1, value=remainder))
    
    return tuple(installments)


def fixed_schedule(
    total_value: Decimal,
    installment_value: Decimal,
) -> tuple[Installment, ...]:
    """Build the equal-installment schedule for a fixed goal."""
    try:
        count = int(total_value // installment_value)
    except InvalidOperation:
        # Quotient does not fit the decimal context
        count = MAX_INSTALLMENTS
    if count + 1 > MAX_INSTALLMENTS:
        raise ScheduleTooLargeError(
            "installment_value",
            f"Installments of {installment_value} would need {count} slots "
            f"(max {MAX_INSTALLMENTS})",
        )
    
    installments = [
        Installment(number=k, value=installment_value) for k in range(1, count + 1)
    ]
    
    remainder = total_value % installment_value
    if remainder > REMAINDER_TOLERANCE:
        installments.append(
            Installment(
                number=count + 1,
                value=remainder.quantize(CENTS, rounding=ROUND_HALF_UP),
            )
        )
    
    return tuple(installments)


def build_schedule(
    goal_type: GoalType,
    total_value: Decimal,
    installment_value: Optional[Decimal] = None,
) -> tuple[Installment, ...]:
    """
    Generate the initial installments for a new goal.
    
    JAR goals have no schedule.
    """
    if goal_type == GoalType.GRID:
        return grid_schedule(total_value)
    if goal_type == GoalType.FIXED:
        if installment_value is None or installment_value <= 0:
            raise InvalidAmountError(
                "installment_value", "Fixed goals need a positive installment value"
            )
        return fixed_schedule(total_value, installment_value)
    return ()
