"""Tests for time window arithmetic."""

from datetime import datetime

import pytest

from dairyops.core.errors import InvalidArgumentError
from dairyops.domain.windows import (
    PeriodToken,
    Window,
    date_range_window,
    end_of_day,
    period_window,
    preceding_window,
    resolve_windows,
    shift_months,
    start_of_day,
)

NOW = datetime(2025, 6, 15, 10, 30)


class TestDayBounds:
    """Inclusive day boundaries."""

    def test_start_and_end_of_day(self):
        """A day runs from midnight to 23:59:59.999."""
        assert start_of_day(NOW) == datetime(2025, 6, 15)
        assert end_of_day(NOW) == datetime(2025, 6, 15, 23, 59, 59, 999000)

    def test_range_covers_both_ends(self):
        window = date_range_window("2025-06-01", "2025-06-03")
        assert window.start == datetime(2025, 6, 1)
        assert window.end == datetime(2025, 6, 3, 23, 59, 59, 999000)
        assert window.days == 3

    def test_reversed_range_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            date_range_window("2025-06-03", "2025-06-01")

    def test_malformed_date_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            date_range_window("yesterday", "2025-06-01")


class TestShiftMonths:
    """Calendar-overflow month arithmetic."""

    def test_plain_shift(self):
        assert shift_months(datetime(2025, 6, 15), -1) == datetime(2025, 5, 15)

    def test_day_overflows_into_next_month(self):
        """March 31 minus one month lands in early March, not on February 28."""
        assert shift_months(datetime(2025, 3, 31), -1) == datetime(2025, 3, 3)
        assert shift_months(datetime(2024, 3, 31), -1) == datetime(2024, 3, 2)

    def test_crosses_year_boundary(self):
        assert shift_months(datetime(2025, 1, 10), -2) == datetime(2024, 11, 10)


class TestPeriodWindow:
    """Relative period windows ending today."""

    def test_week_is_seven_days(self):
        window = period_window(PeriodToken.WEEK, NOW)
        assert window.start == datetime(2025, 6, 9)
        assert window.end == end_of_day(NOW)

    def test_literal_month_keeps_historical_arithmetic(self):
        """June has month index 5, so the start lands on June 4."""
        window = period_window(PeriodToken.MONTH, NOW, "literal")
        assert window.start == datetime(2025, 6, 4)

    def test_literal_month_in_january_goes_back_into_december(self):
        window = period_window(PeriodToken.MONTH, datetime(2025, 1, 20), "literal")
        assert window.start == datetime(2024, 12, 30)

    def test_corrected_month_goes_back_one_month(self):
        window = period_window(PeriodToken.MONTH, NOW, "corrected")
        assert window.start == datetime(2025, 5, 15)

    def test_quarter_span_depends_on_profile(self):
        assert period_window(PeriodToken.QUARTER, NOW, "literal").start == datetime(2024, 12, 15)
        assert period_window(PeriodToken.QUARTER, NOW, "corrected").start == datetime(2025, 3, 15)

    def test_year(self):
        assert period_window(PeriodToken.YEAR, NOW).start == datetime(2024, 6, 15)


class TestResolveWindows:
    """Current and previous windows for trend dashboards."""

    def test_preceding_window_has_equal_length(self):
        current = Window(datetime(2025, 6, 10), end_of_day(datetime(2025, 6, 12)))
        previous = preceding_window(current)
        assert previous.start == datetime(2025, 6, 7)
        assert previous.end == end_of_day(datetime(2025, 6, 9))

    def test_explicit_range_wins_over_period(self):
        current, previous, label = resolve_windows(
            NOW, period="Year", from_date="2025-06-10", to_date="2025-06-12"
        )
        assert current.start == datetime(2025, 6, 10)
        assert previous.start == datetime(2025, 6, 7)
        assert label == "2025-06-10 to 2025-06-12"

    def test_single_date_compares_with_day_before(self):
        current, previous, label = resolve_windows(NOW, day="2025-06-10")
        assert current.start == datetime(2025, 6, 10)
        assert previous.start == datetime(2025, 6, 9)
        assert label == "2025-06-10"

    def test_period_defaults_to_prior_day_baseline(self):
        current, previous, label = resolve_windows(NOW, period="Week")
        assert current.start == datetime(2025, 6, 9)
        assert previous == Window(datetime(2025, 6, 14), end_of_day(datetime(2025, 6, 14)))
        assert label == "Week"

    def test_prior_period_baseline(self):
        _, previous, _ = resolve_windows(NOW, period="Week", baseline="prior_period")
        assert previous.start == datetime(2025, 6, 2)
        assert previous.end == end_of_day(datetime(2025, 6, 8))

    def test_unknown_period_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            resolve_windows(NOW, period="Fortnight")

    def test_nothing_selected_without_default_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            resolve_windows(NOW)
