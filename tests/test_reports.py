"""Tests for read-only report aggregations."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from pigcoin.models.finance import Goal, Transaction, TransactionType
from pigcoin.reports import (
    Period,
    breakdown_by_name,
    goal_overview,
    period_report,
    period_start,
    summarize,
)

NOW = datetime(2024, 6, 15, 14, 30, tzinfo=timezone.utc)


def tx(name, value, kind, when=NOW):
    return Transaction(name=name, value=Decimal(value), type=kind, date=when)


def expense(name, value, when=NOW):
    return tx(name, value, TransactionType.EXPENSE, when)


def income(name, value, when=NOW):
    return tx(name, value, TransactionType.INCOME, when)


class TestSummaries:
    """Tests for summarize and breakdown_by_name."""
    
    def test_summarize(self):
        summary = summarize([income("Pay", "500"), expense("Food", "120")])
        assert summary.total_income == Decimal("500")
        assert summary.total_expense == Decimal("120")
        assert summary.balance == Decimal("380")
        assert summary.transaction_count == 2
    
    def test_breakdown_groups_and_ranks(self):
        transactions = [
            expense("Food", "10"),
            expense("Rent", "900"),
            expense("Food", "15"),
            expense("Bus", "25"),
            income("Pay", "1000"),
        ]
        result = breakdown_by_name(transactions, TransactionType.EXPENSE)
        assert [(r.name, r.value, r.count) for r in result] == [
            ("Rent", Decimal("900"), 1),
            ("Bus", Decimal("25"), 1),
            ("Food", Decimal("25"), 2),
        ]
    
    def test_breakdown_top(self):
        transactions = [expense(f"n{i}", str(i + 1)) for i in range(8)]
        assert len(breakdown_by_name(transactions, TransactionType.EXPENSE)) == 5
        assert len(breakdown_by_name(transactions, TransactionType.EXPENSE, top=None)) == 8


class TestPeriodStart:
    """Tests for window boundaries."""
    
    @pytest.mark.parametrize("period,expected", [
        (Period.DAY, datetime(2024, 6, 15, tzinfo=timezone.utc)),
        (Period.WEEK, datetime(2024, 6, 8, 14, 30, tzinfo=timezone.utc)),
        (Period.MONTH, datetime(2024, 5, 15, 14, 30, tzinfo=timezone.utc)),
        (Period.YEAR, datetime(2023, 6, 15, 14, 30, tzinfo=timezone.utc)),
    ])
    def test_period_start(self, period, expected):
        assert period_start(period, NOW) == expected
    
    def test_month_end_is_clamped(self):
        now = datetime(2024, 3, 31, 12, tzinfo=timezone.utc)
        assert period_start(Period.MONTH, now).date().isoformat() == "2024-02-29"
        leap_day = datetime(2024, 2, 29, 12, tzinfo=timezone.utc)
        assert period_start(Period.YEAR, leap_day).date().isoformat() == "2023-02-28"


class TestPeriodReport:
    """Tests for period_report."""
    
    def test_window_totals_and_rates(self):
        transactions = [
            income("Pay", "1000", NOW - timedelta(days=2)),
            expense("Food", "250", NOW - timedelta(days=1)),
            expense("Old", "999", NOW - timedelta(days=10)),
        ]
        report = period_report(transactions, Period.WEEK, now=NOW)
        assert report.total_income == Decimal("1000")
        assert report.total_expense == Decimal("250")
        assert report.savings_rate == 75.0
        assert report.daily_average == Decimal("35.71")
        assert report.end == NOW
    
    def test_no_income_means_zero_savings_rate(self):
        report = period_report([expense("Food", "10")], Period.DAY, now=NOW)
        assert report.savings_rate == 0.0
        assert report.daily_average == Decimal("10.00")
    
    def test_day_series(self):
        transactions = [
            expense("Breakfast", "5", NOW.replace(hour=9)),
            expense("Midnight", "2", NOW.replace(hour=0, minute=0)),
            income("Pay", "100", NOW.replace(hour=9)),
        ]
        report = period_report(transactions, Period.DAY, now=NOW)
        assert report.labels == ["00h", "04h", "08h", "12h", "16h", "20h", "Now"]
        assert report.data_points[3] == Decimal("5")
        assert report.data_points[0] == Decimal("2")
        assert sum(report.data_points) == Decimal("7")
    
    def test_week_series(self):
        transactions = [
            expense("Food", "4", NOW - timedelta(days=6)),
            expense("Food", "6", NOW),
        ]
        report = period_report(transactions, Period.WEEK, now=NOW)
        assert report.labels == ["09", "10", "11", "12", "13", "14", "15"]
        assert report.data_points[0] == Decimal("4")
        assert report.data_points[-1] == Decimal("6")
    
    def test_month_series(self):
        transactions = [
            expense("Rent", "900", datetime(2024, 5, 31, 9, tzinfo=timezone.utc)),
            expense("Food", "30", datetime(2024, 5, 20, 9, tzinfo=timezone.utc)),
            expense("Too old", "1", datetime(2024, 5, 10, 9, tzinfo=timezone.utc)),
        ]
        report = period_report(transactions, Period.MONTH, now=NOW)
        assert report.labels == ["1-5", "6-10", "11-15", "16-20", "21-25", "26-31"]
        assert report.data_points[5] == Decimal("900")
        assert report.data_points[3] == Decimal("30")
        assert report.total_expense == Decimal("930")
    
    def test_year_series(self):
        transactions = [
            expense("Gift", "50", datetime(2023, 12, 24, tzinfo=timezone.utc)),
            expense("Trip", "365", datetime(2024, 2, 1, tzinfo=timezone.utc)),
        ]
        report = period_report(transactions, Period.YEAR, now=NOW)
        assert report.labels[0] == "Jan"
        assert report.data_points[11] == Decimal("50")
        assert report.data_points[1] == Decimal("365")
        assert report.daily_average == Decimal("1.14")
    
    def test_timezone_of_now_drives_buckets(self):
        local_tz = timezone(timedelta(hours=-3))
        now = NOW.astimezone(local_tz)
        # 02:00 UTC is 23:00 of the previous day at UTC-3
        late = expense("Late", "8", datetime(2024, 6, 15, 2, tzinfo=timezone.utc))
        report = period_report([late], Period.WEEK, now=now)
        assert report.data_points[-2] == Decimal("8")


class TestGoalOverview:
    
    def test_overview(self):
        goals = [
            Goal(name="A", total_value=Decimal("10"), current_value=Decimal("10")),
            Goal(name="B", total_value=Decimal("30"), current_value=Decimal("5")),
        ]
        overview = goal_overview(goals)
        assert overview.goal_count == 2
        assert overview.completed_count == 1
        assert overview.total_current == Decimal("15")
        assert overview.total_target == Decimal("40")
        assert overview.progress_percent == 37.5
    
    def test_no_goals(self):
        assert goal_overview([]).progress_percent == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
