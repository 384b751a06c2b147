from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from dairyops.core.errors import InvalidArgumentError, service_boundary
from dairyops.domain.dashboard import Metric, aggregate_with_trend, sum_of
from dairyops.domain.repository import Repository
from dairyops.domain.windows import (
    date_range_window,
    parse_date,
    preceding_window,
    prior_day_window,
    single_day_window,
)
from dairyops.models.enums import CattleBreed, CattleType, MilkDashboardSession, MilkGrade
from dairyops.models.schema import Cattle, MilkRecord
from dairyops.models.schema.milk import MILK_SESSION_FIELDS

INVALID_QUERY_MESSAGE = "Please enter a valid session or date as query value"

SESSION_FIELDS = {
    MilkDashboardSession.TODAY: MILK_SESSION_FIELDS,
    MilkDashboardSession.MORNING: (MilkRecord.morning_milk,),
    MilkDashboardSession.AFTERNOON: (MilkRecord.afternoon_milk,),
    MilkDashboardSession.EVENING: (MilkRecord.evening_milk,),
}

SESSION_MESSAGES = {
    MilkDashboardSession.TODAY: "Showing all the dashboard data for Today",
    MilkDashboardSession.MORNING: "Showing all milk summary of morning",
    MilkDashboardSession.AFTERNOON: "Showing all milk summary of afternoon",
    MilkDashboardSession.EVENING: "Showing all milk summary of evening",
}


def milk_metrics(db: Session, fields) -> list[Metric]:
    """The seven milk cards, in display order."""
    milk = Repository(db, MilkRecord, joins=(MilkRecord.cattle,))

    def total(*criteria):
        return sum_of(milk, fields, MilkRecord.date, *criteria)

    return [
        Metric("Total Milk", "Milk collected from all cattle", total()),
        Metric("A1 Milk", "A1 grade milk", total(MilkRecord.milk_grade == MilkGrade.A1)),
        Metric("A2 Milk", "A2 grade milk", total(MilkRecord.milk_grade == MilkGrade.A2)),
        Metric(
            "Cow A1 Milk",
            "Single-cow A1 milk",
            total(Cattle.type == CattleType.COW, MilkRecord.milk_grade == MilkGrade.OneCowA1),
        ),
        Metric(
            "Cow A2 Milk",
            "Single-cow A2 milk",
            total(Cattle.type == CattleType.COW, MilkRecord.milk_grade == MilkGrade.OneCowA2),
        ),
        Metric("Buffalo Milk", "Milk from buffaloes", total(Cattle.type == CattleType.BUFFALO)),
        Metric(
            "Karampasu Milk",
            "Milk from Karampasu goats",
            total(Cattle.breed == CattleBreed.KARAMPASU),
        ),
    ]


@service_boundary
def milk_dashboard(
    db: Session,
    now: datetime,
    session: Optional[str] = None,
    day: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> dict:
    """
    Milk cards for today (whole day or one session), a given date, or a range.

    Today and session views compare against yesterday; a date or range
    compares against the preceding window of the same length.
    """
    if session:
        try:
            selected = MilkDashboardSession(session)
        except ValueError:
            raise InvalidArgumentError(INVALID_QUERY_MESSAGE)
        current, previous = single_day_window(now), prior_day_window(now)
        fields = SESSION_FIELDS[selected]
        message = SESSION_MESSAGES[selected]
    elif from_date and to_date:
        current = date_range_window(from_date, to_date)
        previous = preceding_window(current)
        fields = MILK_SESSION_FIELDS
        message = f"Showing all the dashboard data from {from_date} to {to_date}"
    elif day:
        current = single_day_window(parse_date(day))
        previous = preceding_window(current)
        fields = MILK_SESSION_FIELDS
        message = f"Showing all the dashboard data based on date {day}"
    else:
        raise InvalidArgumentError(INVALID_QUERY_MESSAGE)

    cards = aggregate_with_trend(milk_metrics(db, fields), current, previous)
    return {"message": message, "cards": [card.to_dict() for card in cards]}
