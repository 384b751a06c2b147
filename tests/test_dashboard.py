"""Tests for trend math and card formatting."""

from datetime import datetime
from decimal import Decimal

from dairyops.domain.dashboard import (
    Metric,
    TrendStatus,
    aggregate_with_trend,
    format_number,
    format_percent,
    percentage_change,
)
from dairyops.domain.windows import Window


class TestPercentageChange:
    def test_both_zero_is_no_change(self):
        trend = percentage_change(0, 0)
        assert trend.status is TrendStatus.NO_CHANGE
        assert trend.percent == 0

    def test_zero_baseline_saturates_at_hundred(self):
        trend = percentage_change(0, 7)
        assert trend.status is TrendStatus.INCREASE
        assert trend.percent == 100

    def test_increase(self):
        trend = percentage_change(Decimal("40"), Decimal("50"))
        assert trend.status is TrendStatus.INCREASE
        assert trend.percent == Decimal("25.00")

    def test_decrease_reports_magnitude(self):
        trend = percentage_change(8, 6)
        assert trend.status is TrendStatus.DECREASE
        assert trend.percent == Decimal("25.00")

    def test_equal_values(self):
        assert percentage_change(5, 5).status is TrendStatus.NO_CHANGE

    def test_reference_values(self):
        rise = percentage_change(100, 150)
        fall = percentage_change(100, 50)
        assert (rise.status, rise.percent) == (TrendStatus.INCREASE, Decimal("50"))
        assert (fall.status, fall.percent) == (TrendStatus.DECREASE, Decimal("50"))

    def test_rounds_to_two_places(self):
        assert percentage_change(3, 4).percent == Decimal("33.33")


class TestFormatting:
    def test_number_always_has_two_decimals(self):
        assert format_number(3) == "3.00"
        assert format_number(Decimal("12.345")) == "12.35"

    def test_percent_drops_trailing_zeros(self):
        assert format_percent(Decimal("100")) == "100%"
        assert format_percent(Decimal("12.50")) == "12.5%"
        assert format_percent(Decimal("0")) == "0%"
        assert format_percent(Decimal("33.33")) == "33.33%"


class TestAggregateWithTrend:
    def test_cards_follow_metric_order(self):
        """Each card compares the current window against the previous one."""
        current = Window(datetime(2025, 6, 15), datetime(2025, 6, 15, 23, 59))
        previous = Window(datetime(2025, 6, 14), datetime(2025, 6, 14, 23, 59))
        values = {current: 15, previous: 10}

        metrics = [
            Metric("First", "grows", lambda window: values[window]),
            Metric("Second", "empty", lambda window: 0),
        ]
        first, second = aggregate_with_trend(metrics, current, previous)

        assert first.to_dict() == {
            "title": "First",
            "description": "grows",
            "number": "15.00",
            "status": "increase",
            "percentage": "50%",
        }
        assert second.number == "0.00"
        assert second.status == "no_change"
        assert second.percentage == "0%"
