from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Callable, Sequence, Union

from dairyops.domain.repository import Repository, ZERO, to_decimal
from dairyops.domain.windows import Window

Number = Union[int, Decimal]

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")


class TrendStatus(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    NO_CHANGE = "no_change"


@dataclass(frozen=True)
class Trend:
    status: TrendStatus
    percent: Decimal


def round2(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def percentage_change(previous: Number, current: Number) -> Trend:
    """
    Percent change from `previous` to `current`.

    A zero baseline saturates at a 100% increase instead of dividing by zero.
    Decreases carry a positive percent and the "decrease" status.
    """
    previous = to_decimal(previous)
    current = to_decimal(current)
    if previous == 0 and current == 0:
        return Trend(TrendStatus.NO_CHANGE, ZERO)
    if previous == 0:
        return Trend(TrendStatus.INCREASE, HUNDRED)

    change = round2((current - previous) / previous * HUNDRED)
    if change > 0:
        return Trend(TrendStatus.INCREASE, change)
    if change < 0:
        return Trend(TrendStatus.DECREASE, abs(change))
    return Trend(TrendStatus.NO_CHANGE, ZERO)


def format_number(value: Number) -> str:
    return f"{round2(to_decimal(value)):.2f}"


def format_percent(percent: Decimal) -> str:
    """Render like a plain number: 50 -> "50%", 12.50 -> "12.5%"."""
    text = f"{round2(percent):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}%"


@dataclass(frozen=True)
class Metric:
    title: str
    description: str
    compute: Callable[[Window], Number]


@dataclass
class Card:
    title: str
    description: str
    number: str
    status: str = ""
    percentage: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "number": self.number,
            "status": self.status,
            "percentage": self.percentage,
        }


def count_of(repository: Repository, date_column, *criteria) -> Callable[[Window], int]:
    """Metric computing the number of rows dated inside the window."""

    def compute(window: Window) -> int:
        return repository.count(window.contains(date_column), *criteria)

    return compute


def sum_of(
    repository: Repository, fields: Sequence[Any], date_column, *criteria
) -> Callable[[Window], Decimal]:
    """Metric adding up the sums of `fields` over rows dated inside the window."""

    def compute(window: Window) -> Decimal:
        sums = repository.aggregate_sum(fields, window.contains(date_column), *criteria)
        return sum(sums.values(), ZERO)

    return compute


def aggregate(metrics: Sequence[Metric], window: Window) -> list[Number]:
    return [metric.compute(window) for metric in metrics]


def aggregate_with_trend(
    metrics: Sequence[Metric], current: Window, previous: Window
) -> list[Card]:
    """Cards in metric order, each compared against the previous window."""
    cards = []
    for metric in metrics:
        value = metric.compute(current)
        trend = percentage_change(metric.compute(previous), value)
        cards.append(
            Card(
                title=metric.title,
                description=metric.description,
                number=format_number(value),
                status=trend.status.value,
                percentage=format_percent(trend.percent),
            )
        )
    return cards
