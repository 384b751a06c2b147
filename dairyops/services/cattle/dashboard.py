from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from dairyops.core.configs import settings
from dairyops.core.errors import service_boundary
from dairyops.domain.dashboard import (
    Metric,
    aggregate,
    aggregate_with_trend,
    count_of,
    sum_of,
)
from dairyops.domain.repository import Repository
from dairyops.domain.windows import parse_period, period_window, resolve_windows
from dairyops.models.enums import CattleType, HealthStatus, MilkGrade
from dairyops.models.feed import FeedStockOut
from dairyops.models.health import CheckupOut
from dairyops.models.schema import Cattle, Checkup, FeedStock, MilkRecord
from dairyops.models.schema.milk import MILK_SESSION_FIELDS
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)


def top_section_metrics(db: Session) -> list[Metric]:
    cattle = Repository(db, Cattle)
    milk = Repository(db, MilkRecord)
    return [
        Metric(
            "Total Milk",
            "Milk collected across all cattle",
            sum_of(milk, MILK_SESSION_FIELDS, MilkRecord.date),
        ),
        Metric(
            "Total Cattle",
            "Count of all cattle added to the system",
            count_of(cattle, Cattle.farm_entry_date, Cattle.active.is_(True)),
        ),
        Metric(
            "Total Illness Cases",
            "Number of cattle reported sick",
            count_of(
                cattle, Cattle.farm_entry_date, Cattle.health_status == HealthStatus.INJURED
            ),
        ),
        Metric(
            "Newly Added Cattle",
            "Cattle added during the current period",
            count_of(cattle, Cattle.farm_entry_date),
        ),
        Metric(
            "A2 Milk Production",
            "Quantity of A2 milk collected",
            sum_of(
                milk, MILK_SESSION_FIELDS, MilkRecord.date, MilkRecord.milk_grade == MilkGrade.A2
            ),
        ),
    ]


@service_boundary
def top_section_dashboard(
    db: Session,
    now: datetime,
    period: Optional[str] = None,
    day: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> dict:
    """
    Five trend cards for the cattle overview: total milk, total cattle,
    illness cases, newly added cattle and A2 milk.

    Args:
        period: Week, Month, Quarter or Year
        day: a single ISO date
        from_date: start of an explicit ISO date range (needs to_date)
        to_date: end of an explicit ISO date range (needs from_date)
    """
    current, previous, label = resolve_windows(
        now,
        period=period,
        day=day,
        from_date=from_date,
        to_date=to_date,
        profile=settings.compat_profile,
        baseline=settings.trend_baseline,
    )
    cards = aggregate_with_trend(top_section_metrics(db), current, previous)
    return {
        "message": f"Showing the dashboard data for cattle management top section based on {label}",
        "cards": [card.to_dict() for card in cards],
    }


@service_boundary
def dashboard_checkup_records(db: Session) -> dict:
    rows = Repository(db, Checkup).find_many(order_by=(Checkup.date.desc(), Checkup.id.desc()))
    return {
        "message": "Showing all the checkup records",
        "records": [CheckupOut.model_validate(row).model_dump() for row in rows],
    }


@service_boundary
def checkup_graph(db: Session, now: datetime, period: str) -> dict:
    token = parse_period(period)
    window = period_window(token, now, settings.compat_profile)
    checkups = Repository(db, Checkup, joins=(Checkup.cattle,))
    metrics = [
        Metric(cattle_type.value, "", count_of(checkups, Checkup.date, Cattle.type == cattle_type))
        for cattle_type in CattleType
    ]
    cow, buffalo, goat = aggregate(metrics, window)
    return {
        "message": f"Showing the count of health checkup reports based on {token.value}",
        "counts": {"cow": cow, "buffalo": buffalo, "goat": goat},
    }


@service_boundary
def dashboard_feed_stock_records(db: Session, now: datetime, period: str) -> dict:
    token = parse_period(period)
    window = period_window(token, now, settings.compat_profile)
    rows = Repository(db, FeedStock).find_many(
        window.contains(FeedStock.date), order_by=(FeedStock.date.desc(), FeedStock.id.desc())
    )
    return {
        "message": f"Showing the feed stock records based on {token.value}",
        "records": [FeedStockOut.model_validate(row).model_dump() for row in rows],
    }
