"""
Report Aggregations

Read-only summaries computed from ledger snapshots for the charts and
statistics views. Nothing here mutates state or touches storage, and
every figure is recomputed from the transactions passed in.
"""

import calendar
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from pigcoin.models.finance import Goal, Transaction, TransactionType

ZERO = Decimal("0")
CENTS = Decimal("0.01")

MONTH_LABELS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
HOUR_MARKS = [0, 4, 8, 12, 16, 20, 24]
HOUR_LABELS = ["00h", "04h", "08h", "12h", "16h", "20h", "Now"]
DAY_RANGES = [(0, 5), (5, 10), (10, 15), (15, 20), (20, 25), (25, 31)]


class Period(str, Enum):
    """Time windows offered by the statistics view."""
    DAY = "1D"
    WEEK = "7D"
    MONTH = "1M"
    YEAR = "1A"
    
    @property
    def days(self) -> int:
        """Divisor used for the daily average."""
        return {"1D": 1, "7D": 7, "1M": 30, "1A": 365}[self.value]


class BalanceSummary(BaseModel):
    """Income, expense and resulting balance over a set of transactions."""
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO
    transaction_count: int = Field(default=0, ge=0)


class NameTotal(BaseModel):
    """Summed value of all transactions sharing a name."""
    name: str
    value: Decimal
    count: int = Field(ge=1)


class PeriodReport(BaseModel):
    """Totals and a chart series for one statistics window."""
    period: Period
    start: datetime
    end: datetime
    total_income: Decimal
    total_expense: Decimal
    labels: list[str]
    data_points: list[Decimal]
    daily_average: Decimal
    savings_rate: float = Field(
        description="(income - expense) / income as a percentage, 0 without income"
    )


class GoalOverview(BaseModel):
    """Aggregate progress over all goals."""
    goal_count: int = Field(ge=0)
    completed_count: int = Field(ge=0)
    total_current: Decimal
    total_target: Decimal
    progress_percent: float


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def summarize(transactions: Iterable[Transaction]) -> BalanceSummary:
    """Totals by direction plus the balance."""
    income = ZERO
    expense = ZERO
    count = 0
    for t in transactions:
        count += 1
        if t.type == TransactionType.INCOME:
            income += t.value
        else:
            expense += t.value
    return BalanceSummary(
        total_income=income,
        total_expense=expense,
        balance=income - expense,
        transaction_count=count,
    )


def breakdown_by_name(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    top: Optional[int] = 5,
) -> list[NameTotal]:
    """
    Group transactions of one type by name, largest total first.
    
    Args:
        transactions: Transactions to group
        transaction_type: Only transactions of this type are counted
        top: Keep only the N largest groups (None keeps all)
    """
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for t in transactions:
        if t.type != transaction_type:
            continue
        totals[t.name] += t.value
        counts[t.name] += 1
    
    # Ties keep alphabetical order so charts are stable
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    if top is not None:
        ranked = ranked[:top]
    return [
        NameTotal(name=name, value=value, count=counts[name])
        for name, value in ranked
    ]


def _shift_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: Period, now: datetime) -> datetime:
    """
    First instant included in a statistics window.
    
    1D starts at local midnight, the others reach back 7 days, one
    calendar month or one calendar year from `now`. Month arithmetic
    clamps to the last day of a shorter month.
    """
    if period == Period.DAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == Period.WEEK:
        return now - timedelta(days=7)
    if period == Period.MONTH:
        return _shift_months(now, -1)
    return _shift_months(now, -12)


def _local(moment: datetime, now: datetime) -> datetime:
    if now.tzinfo is None:
        # Naive `now` means local wall-clock time
        return moment.astimezone().replace(tzinfo=None) if moment.tzinfo else moment
    return moment.astimezone(now.tzinfo)


def _series(
    period: Period,
    expenses: list[Transaction],
    now: datetime,
) -> tuple[list[str], list[Decimal]]:
    local = [(_local(t.date, now), t.value) for t in expenses]
    
    if period == Period.DAY:
        # Each mark covers the four hours ending at it
        points = [
            _sum(v for d, v in local if mark - 4 < d.hour <= mark)
            for mark in HOUR_MARKS
        ]
        return list(HOUR_LABELS), points
    
    if period == Period.WEEK:
        today = now.date()
        days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
        labels = [f"{d.day:02d}" for d in days]
        points = [_sum(v for d, v in local if d.date() == day) for day in days]
        return labels, points
    
    if period == Period.MONTH:
        labels = []
        points = []
        for low, high in DAY_RANGES:
            labels.append(f"{low + 1}-{high}")
            points.append(_sum(v for d, v in local if low < d.day <= high))
        return labels, points
    
    points = [
        _sum(v for d, v in local if d.month == month)
        for month in range(1, 13)
    ]
    return list(MONTH_LABELS), points


def period_report(
    transactions: Iterable[Transaction],
    period: Period,
    now: Optional[datetime] = None,
) -> PeriodReport:
    """
    Build the statistics view for one window.
    
    Totals cover every transaction dated at or after the window start.
    The chart series only counts expenses.
    """
    now = now or datetime.now().astimezone()
    start = period_start(period, now)
    
    in_window = [t for t in transactions if _local(t.date, now) >= start]
    summary = summarize(in_window)
    expenses = [t for t in in_window if t.type == TransactionType.EXPENSE]
    labels, points = _series(period, expenses, now)
    
    daily_average = (summary.total_expense / period.days).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )
    if summary.total_income > 0:
        rate = (summary.total_income - summary.total_expense) / summary.total_income * 100
        savings_rate = round(float(rate), 1)
    else:
        savings_rate = 0.0
    
    return PeriodReport(
        period=period,
        start=start,
        end=now,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        labels=labels,
        data_points=points,
        daily_average=daily_average,
        savings_rate=savings_rate,
    )


def goal_overview(goals: Iterable[Goal]) -> GoalOverview:
    """Count goals and sum their progress."""
    goals = list(goals)
    total_current = _sum(g.current_value for g in goals)
    total_target = _sum(g.total_value for g in goals)
    progress = (
        min(float(total_current / total_target * 100), 100.0)
        if total_target > 0
        else 0.0
    )
    return GoalOverview(
        goal_count=len(goals),
        completed_count=sum(1 for g in goals if g.is_completed),
        total_current=total_current,
        total_target=total_target,
        progress_percent=progress,
    )
