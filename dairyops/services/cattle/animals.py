from datetime import datetime, timedelta
from decimal import Decimal
from math import ceil
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from dairyops.core.configs import settings
from dairyops.core.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    service_boundary,
)
from dairyops.domain.dashboard import percentage_change
from dairyops.domain.pagination import (
    Composition,
    ListingConfig,
    ListingMessages,
    ListingQuery,
    SortKey,
    enum_domain,
    run_listing,
)
from dairyops.domain.repository import Repository, ZERO, to_decimal
from dairyops.domain.windows import Window, end_of_day, shift_months, start_of_day
from dairyops.models.cattle import CalfIn, CalfOut, CattleIn, CattleOut
from dairyops.models.enums import CattleBreed, CattleType, HealthStatus
from dairyops.models.feed import FeedRecordOut
from dairyops.models.health import CheckupOut
from dairyops.models.milk import MilkRecordOut
from dairyops.models.schema import (
    Calf,
    Cattle,
    Checkup,
    FeedConsumption,
    MilkRecord,
    Vaccination,
)
from dairyops.models.schema.milk import MILK_SESSION_FIELDS
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)

HISTORY_PAGE_SIZE = 10


def get_cattle_by_name(
    db: Session, cattle_name: str, message: str = "No animal found with the cattle ID"
) -> Cattle:
    cattle = Repository(db, Cattle).find_one(Cattle.cattle_name == cattle_name)
    if cattle is None:
        raise NotFoundError(message)
    return cattle


def get_cattle_by_type_and_name(
    db: Session,
    cattle_type: CattleType,
    cattle_name: str,
    message: str = "No cattle found with the given details",
) -> Cattle:
    cattle = Repository(db, Cattle).find_one(
        Cattle.cattle_name == cattle_name, Cattle.type == cattle_type
    )
    if cattle is None:
        raise NotFoundError(message)
    return cattle


def milk_average(morning, afternoon, evening, profile: str = "literal") -> Decimal:
    """
    Combine per-session averages into one daily figure.

    The literal profile keeps the historical formula, which divides only the
    evening term by three.
    """
    morning, afternoon, evening = (to_decimal(v) for v in (morning, afternoon, evening))
    if profile == "corrected":
        return (morning + afternoon + evening) / 3
    return morning + afternoon + evening / 3


def average_milk_windows(now: datetime) -> tuple[Window, Window]:
    """Last month up to today, and the month before that."""
    start = shift_months(start_of_day(now), -1)
    current = Window(start, end_of_day(now))
    previous = Window(shift_months(start, -1), end_of_day(start - timedelta(days=1)))
    return current, previous


def _average_milk_by_cattle(
    db: Session, cattle_ids: list[int], window: Window
) -> dict[int, Decimal]:
    rows = (
        db.query(
            MilkRecord.cattle_id,
            *[func.avg(field) for field in MILK_SESSION_FIELDS],
        )
        .filter(MilkRecord.cattle_id.in_(cattle_ids), window.contains(MilkRecord.date))
        .group_by(MilkRecord.cattle_id)
        .all()
    )
    return {
        cattle_id: milk_average(morning, afternoon, evening, settings.compat_profile)
        for cattle_id, morning, afternoon, evening in rows
    }


def enrich_with_milk_average(db: Session, rows, items: list[dict], now: datetime):
    """Attach the rolling average milk and its month-over-month trend to each row."""
    current, previous = average_milk_windows(now)
    cattle_ids = [row.id for row in rows]
    current_avg = _average_milk_by_cattle(db, cattle_ids, current)
    previous_avg = _average_milk_by_cattle(db, cattle_ids, previous)

    for item in items:
        value = current_avg.get(item["id"], ZERO)
        trend = percentage_change(previous_avg.get(item["id"], ZERO), value)
        item["average_milk"] = value
        item["status"] = trend.status.value
        item["percentage"] = trend.percent


CATTLE_LISTING = ListingConfig(
    entity="cattle",
    model=Cattle,
    sort_options={
        SortKey.NAME_ASC: (Cattle.cattle_name.asc(),),
        SortKey.NAME_DESC: (Cattle.cattle_name.desc(),),
        SortKey.NEWEST: (Cattle.farm_entry_date.desc(), Cattle.id.desc()),
        SortKey.OLDEST: (Cattle.farm_entry_date.asc(), Cattle.id.asc()),
    },
    default_order=(Cattle.farm_entry_date.desc(), Cattle.id.desc()),
    filter_domains=[
        enum_domain("type", Cattle.type, CattleType),
        enum_domain("breed", Cattle.breed, CattleBreed),
        enum_domain("health_status", Cattle.health_status, HealthStatus),
    ],
    search=lambda term: Cattle.cattle_name.icontains(term, autoescape=True),
    date_column=Cattle.farm_entry_date,
    messages=ListingMessages(
        initial="Showing initial paginated data",
        sort={
            SortKey.NAME_ASC: "Showing data sorted by name ascending",
            SortKey.NAME_DESC: "Showing data sorted by name descending",
            SortKey.NEWEST: "Showing data sorted by newest",
            SortKey.OLDEST: "Showing data sorted by oldest",
        },
        filter="Showing filtered data",
        search="Showing the searched records based on {search}",
        date="Showing filtered data from {from_date} to {to_date}",
    ),
    composition=Composition.REPLACE,
    serialize=lambda row: CattleOut.model_validate(row).model_dump(),
    enrich=enrich_with_milk_average,
    invalid_sort_message="Invalid sort option",
    invalid_filter_message="Please enter a valid filter value {type, breed, health status}",
)


def _cattle_values(body: CattleIn) -> dict:
    values = body.model_dump()
    values["birth_date"] = start_of_day(body.birth_date)
    values["farm_entry_date"] = start_of_day(body.farm_entry_date)
    return values


@service_boundary
def add_cattle(db: Session, body: CattleIn, user_id: Optional[int] = None) -> dict:
    repository = Repository(db, Cattle)
    if repository.find_one(Cattle.cattle_name == body.cattle_name):
        raise ConflictError("Cattle ID is already in use")

    cattle = repository.create(user_id=user_id, **_cattle_values(body))
    logger.info(f"Added cattle {cattle.cattle_name} (id: {cattle.id})")
    return {
        "message": "New animal added successfully!",
        "cattle": CattleOut.model_validate(cattle).model_dump(),
    }


@service_boundary
def list_cattle(db: Session, query: ListingQuery, now: datetime) -> dict:
    return run_listing(db, CATTLE_LISTING, query, now).to_dict()


@service_boundary
def cattle_details(db: Session, cattle_name: str) -> dict:
    cattle = get_cattle_by_name(db, cattle_name)

    averages = Repository(db, MilkRecord).aggregate_average(
        MILK_SESSION_FIELDS, MilkRecord.cattle_id == cattle.id
    )
    overall_average = sum((to_decimal(v) for v in averages.values()), ZERO) / 3
    last_vaccination = Repository(db, Vaccination).find_one(
        Vaccination.cattle_id == cattle.id, order_by=(Vaccination.date.desc(),)
    )
    average_feed = Repository(db, FeedConsumption).aggregate_average(
        [FeedConsumption.quantity], FeedConsumption.cattle_id == cattle.id
    )["quantity"]
    calf_count = Repository(db, Calf).count(Calf.cattle_id == cattle.id)

    return {
        "message": f"Showing the details of the animal {cattle_name}",
        "details": {
            "overall_average_milk": overall_average,
            "last_vaccination": last_vaccination.date if last_vaccination else None,
            "average_feed": average_feed if average_feed is not None else ZERO,
            "calf_count": calf_count,
            "cattle": CattleOut.model_validate(cattle).model_dump(),
        },
    }


@service_boundary
def update_cattle(db: Session, cattle_name: str, body: CattleIn) -> dict:
    repository = Repository(db, Cattle)
    cattle = get_cattle_by_name(db, cattle_name)
    if body.cattle_name != cattle_name and repository.find_one(
        Cattle.cattle_name == body.cattle_name
    ):
        raise ConflictError("Cattle ID is already in use")

    repository.update(cattle, **_cattle_values(body))
    logger.info(f"Updated cattle {cattle_name} -> {cattle.cattle_name}")
    return {
        "message": "Animal details updated successfully!",
        "cattle": CattleOut.model_validate(cattle).model_dump(),
    }


@service_boundary
def delete_cattle(db: Session, cattle_name: str) -> dict:
    cattle = get_cattle_by_name(db, cattle_name)
    Repository(db, Cattle).delete(cattle)
    logger.info(f"Deleted cattle {cattle_name} with its dependent records")
    return {"message": "Animal deleted successfully!"}


@service_boundary
def active_cattle_names(db: Session, cattle_type: Optional[CattleType] = None) -> dict:
    criteria = [Cattle.active.is_(True)]
    if cattle_type is not None:
        criteria.append(Cattle.type == cattle_type)
    rows = Repository(db, Cattle).find_many(*criteria, order_by=(Cattle.cattle_name.asc(),))
    return {
        "message": "Showing all the active cattle names",
        "names": [row.cattle_name for row in rows],
    }


def _history(db: Session, cattle_name: str, model, out_model, page: int, label: str) -> dict:
    if page < 1:
        raise InvalidArgumentError("Page number must be 1 or greater")
    cattle = get_cattle_by_name(db, cattle_name)

    repository = Repository(db, model)
    criteria = model.cattle_id == cattle.id
    total_count = repository.count(criteria)
    rows = repository.find_many(
        criteria,
        order_by=(model.date.desc(), model.id.desc()),
        skip=(page - 1) * HISTORY_PAGE_SIZE,
        take=HISTORY_PAGE_SIZE,
    )
    return {
        "message": f"Showing all {label} records {cattle_name}",
        "items": [out_model.model_validate(row).model_dump() for row in rows],
        "total_count": total_count,
        "total_pages": ceil(total_count / HISTORY_PAGE_SIZE),
    }


@service_boundary
def feed_history(db: Session, cattle_name: str, page: int = 1) -> dict:
    return _history(db, cattle_name, FeedConsumption, FeedRecordOut, page, "feed")


@service_boundary
def milk_history(db: Session, cattle_name: str, page: int = 1) -> dict:
    return _history(db, cattle_name, MilkRecord, MilkRecordOut, page, "milk")


@service_boundary
def checkup_history(db: Session, cattle_name: str, page: int = 1) -> dict:
    return _history(db, cattle_name, Checkup, CheckupOut, page, "medical")


def _calves_of(db: Session, cattle: Cattle) -> list[dict]:
    rows = Repository(db, Calf).find_many(
        Calf.cattle_id == cattle.id, order_by=(Calf.birth_date.desc(), Calf.id.desc())
    )
    return [CalfOut.model_validate(row).model_dump() for row in rows]


@service_boundary
def add_calf(db: Session, body: CalfIn) -> dict:
    cattle = get_cattle_by_name(db, body.cattle_name)
    repository = Repository(db, Calf)
    if repository.find_one(Calf.calf_id == body.calf_id):
        raise ConflictError("Calf ID is already in use")

    repository.create(
        calf_id=body.calf_id,
        cattle_id=cattle.id,
        birth_date=start_of_day(body.birth_date),
        gender=body.gender,
        health_status=body.health_status,
        weight=body.weight,
    )
    logger.info(f"Added calf {body.calf_id} to cattle {cattle.cattle_name}")
    return {"message": "New calf added successfully!", "calves": _calves_of(db, cattle)}


@service_boundary
def list_calves(db: Session, cattle_name: str) -> dict:
    cattle = get_cattle_by_name(db, cattle_name)
    return {
        "message": f"Showing all the calf details for {cattle_name}",
        "calves": _calves_of(db, cattle),
    }


def _parse_cattle_type(value: str) -> CattleType:
    try:
        return CattleType(value)
    except ValueError:
        raise InvalidArgumentError("Please enter valid type")


@service_boundary
def generate_cattle_id(db: Session, cattle_type: str) -> dict:
    parsed = _parse_cattle_type(cattle_type)
    count = Repository(db, Cattle).count()
    return {"message": "New Cattle ID generated", "cattle_id": f"{parsed.value.lower()}-{count}"}


@service_boundary
def generate_calf_id(db: Session, cattle_type: str) -> dict:
    parsed = _parse_cattle_type(cattle_type)
    count = Repository(db, Calf).count()
    return {"message": "New Calf ID generated", "calf_id": f"{parsed.value.lower()[0]}-{count}"}
