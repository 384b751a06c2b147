from datetime import datetime
from typing import Optional

from sqlalchemy import distinct, func, or_
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
    Stage,
    enum_domain,
    run_listing,
)
from dairyops.domain.repository import Repository
from dairyops.domain.windows import PeriodToken, Window, date_range_window, resolve_windows
from dairyops.models.enums import CattleType, HealthStatus
from dairyops.models.health import VaccinationEditIn, VaccinationIn, VaccinationOut
from dairyops.models.schema import Cattle, Checkup, Vaccination
from dairyops.services.cattle.animals import get_cattle_by_name, get_cattle_by_type_and_name
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)


VACCINATION_LISTING = ListingConfig(
    entity="vaccination",
    model=Vaccination,
    sort_options={
        SortKey.NAME_ASC: (Cattle.cattle_name.asc(), Vaccination.id.asc()),
        SortKey.NAME_DESC: (Cattle.cattle_name.desc(), Vaccination.id.desc()),
        SortKey.NEWEST: (Vaccination.date.desc(), Vaccination.id.desc()),
        SortKey.OLDEST: (Vaccination.date.asc(), Vaccination.id.asc()),
    },
    default_order=(Vaccination.date.desc(), Vaccination.id.desc()),
    filter_domains=[enum_domain("cattle_type", Cattle.type, CattleType)],
    search=lambda term: or_(
        Vaccination.name.icontains(term, autoescape=True),
        Cattle.cattle_name.icontains(term, autoescape=True),
    ),
    date_column=Vaccination.date,
    messages=ListingMessages(
        initial="Showing the all initial vaccination records",
        sort="Showing the sorted records based on {sort_by}",
        filter="Showing filtered vaccination records for {filters}",
        search="Showing the searched records based on {search}",
        date="Showing filtered vaccination records between {from_date} and {to_date}",
        filter_and_date=(
            "Showing filtered vaccination records for {filters} "
            "between {from_date} and {to_date}"
        ),
    ),
    composition=Composition.CUMULATIVE,
    serialize=lambda row: VaccinationOut.model_validate(row).model_dump(),
    joins=(Vaccination.cattle,),
    invalid_sort_message="Please provide a valid sortBy value",
    invalid_filter_message="Please enter a valid cattle type",
    message_order=(Stage.SEARCH, Stage.SORT, Stage.FILTER, Stage.DATE),
)


def _get_vaccination(db: Session, vaccination_id: int) -> Vaccination:
    vaccination = Repository(db, Vaccination).find_one(Vaccination.id == vaccination_id)
    if vaccination is None:
        raise NotFoundError("No record found with the given id")
    return vaccination


@service_boundary
def add_vaccination(db: Session, body: VaccinationIn) -> dict:
    cattle = get_cattle_by_type_and_name(
        db, body.type, body.cattle_name, "No cattle found with the type and cattle name"
    )
    vaccination = Repository(db, Vaccination).create(
        cattle_id=cattle.id,
        date=body.date,
        name=body.name,
        notes=body.notes,
        doctor_name=body.doctor_name,
        doctor_phone=body.doctor_phone,
    )
    logger.info(f"Added vaccination {vaccination.id} for {cattle.cattle_name}")
    return {"message": "New doctor vaccination record added successfully!", "id": vaccination.id}


@service_boundary
def list_vaccinations(db: Session, query: ListingQuery) -> dict:
    """
    One page of vaccination records, plus the number of checkups on cattle
    currently marked injured.
    """
    result = run_listing(db, VACCINATION_LISTING, query).to_dict()
    result["total_illness_count"] = Repository(db, Checkup, joins=(Checkup.cattle,)).count(
        Cattle.health_status == HealthStatus.INJURED
    )
    return result


@service_boundary
def cattle_vaccinations(db: Session, cattle_name: str) -> dict:
    cattle = get_cattle_by_name(db, cattle_name, "No cattle found with the given name")
    rows = Repository(db, Vaccination).find_many(
        Vaccination.cattle_id == cattle.id,
        order_by=(Vaccination.date.desc(), Vaccination.id.desc()),
    )
    return {
        "message": f"Showing all the details of the {cattle.cattle_name}",
        "cattle_name": cattle.cattle_name,
        "image1": cattle.image1,
        "image2": cattle.image2,
        "type": cattle.type,
        "active": cattle.active,
        "last_vaccination_date": rows[0].date if rows else None,
        "vaccination_count": len(rows),
        "records": [VaccinationOut.model_validate(row).model_dump() for row in rows],
    }


@service_boundary
def edit_vaccination(db: Session, vaccination_id: int, body: VaccinationEditIn) -> dict:
    vaccination = _get_vaccination(db, vaccination_id)
    Repository(db, Vaccination).update(vaccination, **body.model_dump())
    logger.info(f"Updated vaccination {vaccination_id}")
    return {
        "message": "Vaccination report updated successfully!",
        "vaccination": VaccinationOut.model_validate(vaccination).model_dump(),
    }


@service_boundary
def delete_vaccination(db: Session, vaccination_id: int) -> dict:
    vaccination = _get_vaccination(db, vaccination_id)
    Repository(db, Vaccination).delete(vaccination)
    logger.info(f"Deleted vaccination {vaccination_id}")
    return {"message": "Vaccination report deleted successfully!"}


def _vaccinated_cattle(db: Session):
    def compute(window: Window) -> int:
        return (
            db.query(func.count(distinct(Vaccination.cattle_id)))
            .filter(window.contains(Vaccination.date))
            .scalar()
            or 0
        )

    return compute


def vaccination_metrics(db: Session) -> list[Metric]:
    return [
        Metric(
            "Total Vaccinations",
            "Total vaccination doses given",
            count_of(Repository(db, Vaccination), Vaccination.date),
        ),
        Metric(
            "Vaccinated Cattle",
            "Distinct cattle that received a vaccination",
            _vaccinated_cattle(db),
        ),
    ]


@service_boundary
def vaccination_dashboard(
    db: Session,
    now: datetime,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> dict:
    current, previous, label = resolve_windows(
        now,
        from_date=from_date,
        to_date=to_date,
        profile=settings.compat_profile,
        baseline="prior_period",
        default_period=PeriodToken.WEEK,
    )
    cards = aggregate_with_trend(vaccination_metrics(db), current, previous)
    if from_date and to_date:
        message = f"Showing the vaccination dashboard data from {label}"
    else:
        message = "Showing the vaccination dashboard data from last week"
    return {"message": message, "cards": [card.to_dict() for card in cards]}


@service_boundary
def vaccinations_for_range(
    db: Session, cattle_name: str, from_date: str, to_date: str
) -> dict:
    window = date_range_window(from_date, to_date)
    cattle = get_cattle_by_name(db, cattle_name, "No cattle found with the given name")
    rows = Repository(db, Vaccination).find_many(
        Vaccination.cattle_id == cattle.id,
        window.contains(Vaccination.date),
        order_by=(Vaccination.date.desc(), Vaccination.id.desc()),
    )
    return {
        "message": f"Showing all vaccination records for {from_date} to {to_date}",
        "records": [VaccinationOut.model_validate(row).model_dump() for row in rows],
    }
