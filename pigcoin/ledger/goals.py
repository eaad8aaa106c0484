"""
Goal Ledger

Owns the goal collection and every mutation on it.

INVARIANT: for GRID and FIXED goals, current_value always equals the
sum of paid installment values. Every installment change recomputes
current_value from scratch instead of adjusting it incrementally.

Lookups that miss (unknown goal id, unknown installment number) are
no-ops and return None. Bad input raises before anything changes.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from pigcoin.ledger.schedule import build_schedule
from pigcoin.models.finance import (
    Goal,
    GoalProgress,
    GoalType,
    Installment,
    utc_now,
)
from pigcoin.validation.validator import (
    AmountInput,
    InvalidInputError,
    parse_amount,
    parse_delta,
    validate_goal_input,
)


class GoalKindError(InvalidInputError):
    """Operation not allowed for this kind of goal."""
    pass


def crossed_target(before: Decimal, after: Decimal, target: Decimal) -> bool:
    """True when a change moved a value from below the target to at-or-above it."""
    return before < target <= after


class GoalLedger:
    """
    In-memory goal collection plus derived-value computation.

    Goals are immutable snapshots. Mutations replace the affected goal
    with a new one and keep collection order (newest first).
    """

    def __init__(self, goals: Iterable[Goal] = ()):
        self._goals: tuple[Goal, ...] = tuple(goals)

    @property
    def goals(self) -> tuple[Goal, ...]:
        return self._goals

    def __len__(self) -> int:
        return len(self._goals)

    def get(self, goal_id: str) -> Optional[Goal]:
        for goal in self._goals:
            if goal.id == goal_id:
                return goal
        return None

    def _replace(self, updated: Goal) -> Goal:
        self._goals = tuple(
            updated if goal.id == updated.id else goal for goal in self._goals
        )
        return updated

    def _with_installments(
        self,
        goal: Goal,
        installments: tuple[Installment, ...],
    ) -> GoalProgress:
        """Swap in new installments and recompute current_value from the paid set."""
        current = sum((i.value for i in installments if i.paid), Decimal("0"))
        updated = goal.model_copy(
            update={"installments": installments, "current_value": current}
        )
        self._replace(updated)
        return GoalProgress(
            goal=updated,
            completed=crossed_target(goal.current_value, current, goal.total_value),
        )

    # =========================================================================
    # Operations
    # =========================================================================

    def create_goal(
        self,
        name: str,
        total_value: AmountInput,
        goal_type: Union[str, GoalType] = GoalType.GRID,
        installment_value: Optional[AmountInput] = None,
        now: Optional[datetime] = None,
    ) -> Goal:
        """
        Create a goal and generate its full installment schedule.

        Args:
            name: Goal label
            total_value: Target amount (> 0)
            goal_type: GRID, FIXED or JAR
            installment_value: Unit for FIXED goals (> 0), ignored otherwise
            now: Creation timestamp, defaults to the current UTC time

        Returns:
            The new goal, which is also prepended to the collection

        Raises:
            InvalidInputError: If any argument is invalid
        """
        clean_name, total, kind, unit = validate_goal_input(
            name, total_value, goal_type, installment_value
        )
        installments = build_schedule(kind, total, unit)

        goal = Goal(
            name=clean_name,
            total_value=total,
            current_value=Decimal("0"),
            type=kind,
            installments=installments,
            created_at=now or utc_now(),
        )
        self._goals = (goal,) + self._goals
        return goal

    def toggle_installment(
        self,
        goal_id: str,
        installment_number: int,
        value: Optional[AmountInput] = None,
    ) -> Optional[GoalProgress]:
        """
        Flip the paid flag of an installment.

        When `value` is given it replaces the installment's stored value.

        Returns:
            The updated goal and whether this toggle completed it,
            or None if the goal or installment does not exist
        """
        new_value = parse_amount(value, "value") if value is not None else None

        goal = self.get(goal_id)
        if goal is None or goal.find_installment(installment_number) is None:
            return None

        installments = []
        for installment in goal.installments:
            if installment.number == installment_number:
                changes = {"paid": not installment.paid}
                if new_value is not None:
                    changes["value"] = new_value
                installment = installment.model_copy(update=changes)
            installments.append(installment)

        return self._with_installments(goal, tuple(installments))

    def add_progress(
        self,
        goal_id: str,
        amount: AmountInput,
    ) -> Optional[GoalProgress]:
        """
        Record an ad-hoc deposit outside the generated schedule.

        The deposit is appended as a paid installment numbered one past
        the highest existing number. Its stored value is capped at the
        amount still missing, so current_value never exceeds the target
        and still equals the paid sum. A deposit into a goal that is
        already complete is recorded with a value of zero.

        Returns:
            The updated goal and whether this deposit completed it,
            or None if the goal does not exist
        """
        requested = parse_amount(amount, "amount")

        goal = self.get(goal_id)
        if goal is None:
            return None

        applied = min(requested, goal.remaining)

        deposit = Installment(
            number=goal.next_installment_number,
            value=applied,
            paid=True,
        )
        installments = goal.installments + (deposit,)

        if goal.type.has_schedule:
            return self._with_installments(goal, installments)

        # Jars move independently of their installments
        current = goal.current_value + applied
        updated = self._replace(
            goal.model_copy(
                update={"installments": installments, "current_value": current}
            )
        )
        return GoalProgress(
            goal=updated,
            completed=crossed_target(goal.current_value, current, goal.total_value),
        )

    def update_goal_amount(
        self,
        goal_id: str,
        delta: AmountInput,
    ) -> Optional[GoalProgress]:
        """
        Move a savings jar up or down by `delta`, never below zero.

        Raises:
            GoalKindError: If the goal is installment driven, since a
                free adjustment would break the paid-sum invariant
        """
        change = parse_delta(delta, "delta")

        goal = self.get(goal_id)
        if goal is None:
            return None
        if goal.type.has_schedule:
            raise GoalKindError(
                "type",
                f"Goal {goal.name!r} is a {goal.type.value} goal; "
                "use installments or progress instead",
            )

        current = max(goal.current_value + change, Decimal("0"))
        updated = self._replace(goal.model_copy(update={"current_value": current}))
        return GoalProgress(
            goal=updated,
            completed=crossed_target(goal.current_value, current, goal.total_value),
        )

    def delete_goal(self, goal_id: str) -> bool:
        """Remove a goal. Returns False if it did not exist."""
        remaining = tuple(goal for goal in self._goals if goal.id != goal_id)
        deleted = len(remaining) != len(self._goals)
        self._goals = remaining
        return deleted

    def totals(self) -> tuple[Decimal, Decimal]:
        """
        Aggregate progress over all goals.

        Returns:
            (total_current, total_target)
        """
        total_current = sum((g.current_value for g in self._goals), Decimal("0"))
        total_target = sum((g.total_value for g in self._goals), Decimal("0"))
        return total_current, total_target
