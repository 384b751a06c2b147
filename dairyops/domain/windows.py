"""
Time windows used by listings and dashboards.

All bounds are naive local datetimes with inclusive day boundaries:
the lower bound is 00:00:00.000 and the upper bound 23:59:59.999.
Month and year shifts follow calendar-overflow semantics, so shifting
March 31 back one month lands on March 3 (or 2 in leap years) rather than
being clamped to February 28.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Union

from dairyops.core.errors import InvalidArgumentError

END_OF_DAY = time(23, 59, 59, 999000)

DateLike = Union[date, datetime]


class PeriodToken(str, Enum):
    WEEK = "Week"
    MONTH = "Month"
    QUARTER = "Quarter"
    YEAR = "Year"


INVALID_PERIOD_MESSAGE = "Enter a valid query value {Week,Month,Quarter,Year}"


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime

    @property
    def days(self) -> int:
        return (self.end.date() - self.start.date()).days + 1

    def contains(self, column):
        """SQL predicate restricting `column` to this window."""
        return column.between(self.start, self.end)


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def start_of_day(value: DateLike) -> datetime:
    return datetime.combine(_as_date(value), time.min)


def end_of_day(value: DateLike) -> datetime:
    return datetime.combine(_as_date(value), END_OF_DAY)


def parse_date(value: str, field: str = "date") -> date:
    """Parse an ISO date (a full ISO timestamp is accepted and truncated)."""
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Please enter a valid {field}: {value}")


def parse_period(token: str) -> PeriodToken:
    try:
        return PeriodToken(token)
    except ValueError:
        raise InvalidArgumentError(INVALID_PERIOD_MESSAGE)


def single_day_window(day: DateLike) -> Window:
    return Window(start_of_day(day), end_of_day(day))


def date_range_window(from_date: str, to_date: str) -> Window:
    start = parse_date(from_date, "fromDate")
    end = parse_date(to_date, "toDate")
    if start > end:
        raise InvalidArgumentError("fromDate must not be later than toDate")
    return Window(start_of_day(start), end_of_day(end))


def shift_months(value: datetime, months: int) -> datetime:
    """Move `value` by whole months, letting an out-of-range day overflow."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    first = value.replace(year=year, month=month + 1, day=1)
    return first + timedelta(days=value.day - 1)


def shift_years(value: datetime, years: int) -> datetime:
    return shift_months(value, years * 12)


def period_start(token: PeriodToken, now: datetime, profile: str = "literal") -> datetime:
    today = start_of_day(now)
    if token is PeriodToken.WEEK:
        return today - timedelta(days=6)
    if token is PeriodToken.MONTH:
        if profile == "corrected":
            return shift_months(today, -1)
        # historical arithmetic: day-of-month set to the zero-based month index minus one
        return today.replace(day=1) + timedelta(days=today.month - 3)
    if token is PeriodToken.QUARTER:
        return shift_months(today, -3 if profile == "corrected" else -6)
    return shift_years(today, -1)


def period_window(token: PeriodToken, now: datetime, profile: str = "literal") -> Window:
    return Window(period_start(token, now, profile), end_of_day(now))


def preceding_window(window: Window) -> Window:
    """The equal-length range ending the day before `window` starts."""
    end = end_of_day(window.start - timedelta(days=1))
    start = start_of_day(end - timedelta(days=window.days - 1))
    return Window(start, end)


def prior_day_window(now: datetime) -> Window:
    return single_day_window(now - timedelta(days=1))


def previous_period_window(
    token: PeriodToken, window: Window, profile: str = "literal"
) -> Window:
    """Previous window for a relative period: the same span, one period earlier."""
    start = window.start
    if token is PeriodToken.WEEK:
        previous_start = start - timedelta(days=7)
    elif token is PeriodToken.MONTH:
        previous_start = shift_months(start, -1)
    elif token is PeriodToken.QUARTER:
        previous_start = shift_months(start, -3 if profile == "corrected" else -6)
    else:
        previous_start = shift_years(start, -1)
    return Window(previous_start, end_of_day(start - timedelta(days=1)))


def resolve_windows(
    now: datetime,
    period: Optional[str] = None,
    day: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    profile: str = "literal",
    baseline: str = "prior_day",
    default_period: Optional[PeriodToken] = None,
) -> tuple[Window, Window, str]:
    """
    Resolve the current and previous window of a trend dashboard.

    An explicit `from_date`/`to_date` pair wins, then a single `day`, then the
    relative `period` token (falling back to `default_period`). Explicit
    ranges compare against the preceding range of equal length. Relative
    periods compare against the previous calendar day, or against the
    previous period when `baseline` is "prior_period".

    Returns:
        (current window, previous window, label describing the selection)
    """
    if from_date and to_date:
        current = date_range_window(from_date, to_date)
        return current, preceding_window(current), f"{from_date} to {to_date}"
    if day:
        current = single_day_window(parse_date(day))
        return current, preceding_window(current), day

    if period is None and default_period is None:
        raise InvalidArgumentError(INVALID_PERIOD_MESSAGE)
    token = parse_period(period) if period is not None else default_period
    current = period_window(token, now, profile)
    if baseline == "prior_period":
        previous = previous_period_window(token, current, profile)
    else:
        previous = prior_day_window(now)
    return current, previous, token.value
