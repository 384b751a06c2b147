from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from dairyops.core.configs import settings
from dairyops.core.errors import NotFoundError, service_boundary
from dairyops.domain.dashboard import Metric, aggregate_with_trend, count_of
from dairyops.domain.pagination import (
    Composition,
    ListingConfig,
    ListingMessages,
    ListingQuery,
    SortKey,
    enum_domain,
    run_listing,
)
from dairyops.domain.repository import Repository
from dairyops.domain.windows import PeriodToken, date_range_window, resolve_windows
from dairyops.models.enums import CattleType, HealthStatus
from dairyops.models.health import CheckupEditIn, CheckupIn, CheckupOut
from dairyops.models.schema import Cattle, Checkup
from dairyops.services.cattle.animals import get_cattle_by_name, get_cattle_by_type_and_name
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)


CHECKUP_LISTING = ListingConfig(
    entity="checkup",
    model=Checkup,
    sort_options={
        SortKey.NAME_ASC: (Checkup.prescription.asc(), Checkup.id.asc()),
        SortKey.NAME_DESC: (Checkup.prescription.desc(), Checkup.id.desc()),
        SortKey.NEWEST: (Checkup.date.desc(), Checkup.id.desc()),
        SortKey.OLDEST: (Checkup.date.asc(), Checkup.id.asc()),
    },
    default_order=(Checkup.date.desc(), Checkup.id.desc()),
    filter_domains=[enum_domain("cattle_type", Cattle.type, CattleType)],
    search=lambda term: or_(
        Cattle.cattle_name.icontains(term, autoescape=True),
        Checkup.prescription.icontains(term, autoescape=True),
    ),
    date_column=Checkup.date,
    messages=ListingMessages(
        initial="Showing initial all checkup records",
        sort="Showing the sorted data based on the {sort_by}",
        filter="Showing the filtered records based on {filters}",
        search="Showing the searched records based on {search}",
        date="Showing the checkup records from {from_date} to {to_date}",
    ),
    composition=Composition.CUMULATIVE,
    serialize=lambda row: CheckupOut.model_validate(row).model_dump(),
    joins=(Checkup.cattle,),
    invalid_sort_message="Please a valid sort by value",
    invalid_filter_message="Please enter a valid cattle type",
)


def _get_checkup(db: Session, checkup_id: int) -> Checkup:
    checkup = Repository(db, Checkup).find_one(Checkup.id == checkup_id)
    if checkup is None:
        raise NotFoundError("No record found with the given id")
    return checkup


@service_boundary
def add_checkup(db: Session, body: CheckupIn) -> dict:
    cattle = get_cattle_by_type_and_name(
        db, body.type, body.cattle_name, "No cattle found with the type and cattle name"
    )
    checkup = Repository(db, Checkup).create(
        cattle_id=cattle.id,
        date=body.date,
        prescription=body.prescription,
        description=body.description,
        doctor_name=body.doctor_name,
        doctor_phone=body.doctor_phone,
    )
    logger.info(f"Added checkup {checkup.id} for {cattle.cattle_name}")
    return {"message": "New doctor checkup added successfully!", "id": checkup.id}


@service_boundary
def list_checkups(db: Session, query: ListingQuery) -> dict:
    return run_listing(db, CHECKUP_LISTING, query).to_dict()


@service_boundary
def cattle_checkups(db: Session, cattle_name: str) -> dict:
    cattle = get_cattle_by_name(db, cattle_name, "No cattle found with the given name")
    rows = Repository(db, Checkup).find_many(
        Checkup.cattle_id == cattle.id, order_by=(Checkup.date.desc(), Checkup.id.desc())
    )
    return {
        "message": f"Showing all the details of the {cattle.cattle_name}",
        "cattle_name": cattle.cattle_name,
        "image1": cattle.image1,
        "image2": cattle.image2,
        "type": cattle.type,
        "active": cattle.active,
        "last_checkup_date": rows[0].date if rows else None,
        "checkup_count": len(rows),
        "records": [CheckupOut.model_validate(row).model_dump() for row in rows],
    }


@service_boundary
def edit_checkup(db: Session, checkup_id: int, body: CheckupEditIn) -> dict:
    checkup = _get_checkup(db, checkup_id)
    Repository(db, Checkup).update(checkup, **body.model_dump())
    logger.info(f"Updated checkup {checkup_id}")
    return {
        "message": "Checkup report updated successfully!",
        "checkup": CheckupOut.model_validate(checkup).model_dump(),
    }


@service_boundary
def delete_checkup(db: Session, checkup_id: int) -> dict:
    checkup = _get_checkup(db, checkup_id)
    Repository(db, Checkup).delete(checkup)
    logger.info(f"Deleted checkup {checkup_id}")
    return {"message": "Checkup report deleted successfully!"}


def checkup_metrics(db: Session) -> list[Metric]:
    checkups = Repository(db, Checkup, joins=(Checkup.cattle,))
    return [
        Metric(
            "Total Checkups",
            "Total health checkups done",
            count_of(checkups, Checkup.date),
        ),
        Metric(
            "Illness Cases",
            "Reported health issues or symptoms",
            count_of(checkups, Checkup.date, Cattle.health_status == HealthStatus.INJURED),
        ),
    ]


@service_boundary
def checkup_dashboard(
    db: Session,
    now: datetime,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> dict:
    """
    Checkup and illness counts for an explicit range, or for the last seven
    days compared with the seven days before.
    """
    current, previous, label = resolve_windows(
        now,
        from_date=from_date,
        to_date=to_date,
        profile=settings.compat_profile,
        baseline="prior_period",
        default_period=PeriodToken.WEEK,
    )
    cards = aggregate_with_trend(checkup_metrics(db), current, previous)
    if from_date and to_date:
        message = f"Showing the checkup dashboard data from {label}"
    else:
        message = "Showing the checkup dashboard data from last week"
    return {"message": message, "cards": [card.to_dict() for card in cards]}


@service_boundary
def checkups_for_range(db: Session, cattle_name: str, from_date: str, to_date: str) -> dict:
    window = date_range_window(from_date, to_date)
    cattle = get_cattle_by_name(db, cattle_name, "No cattle found with the given name")
    rows = Repository(db, Checkup).find_many(
        Checkup.cattle_id == cattle.id,
        window.contains(Checkup.date),
        order_by=(Checkup.date.desc(), Checkup.id.desc()),
    )
    return {
        "message": f"Showing all checkup records for {from_date} to {to_date}",
        "records": [CheckupOut.model_validate(row).model_dump() for row in rows],
    }
