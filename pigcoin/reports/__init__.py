"""Read-only reporting package."""

from pigcoin.reports.aggregations import (
    BalanceSummary,
    GoalOverview,
    NameTotal,
    Period,
    PeriodReport,
    breakdown_by_name,
    goal_overview,
    period_report,
    period_start,
    summarize,
)

__all__ = [
    "BalanceSummary",
    "GoalOverview",
    "NameTotal",
    "Period",
    "PeriodReport",
    "breakdown_by_name",
    "goal_overview",
    "period_report",
    "period_start",
    "summarize",
]
