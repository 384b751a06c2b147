from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dairyops.core.db import get_db
from dairyops.domain.pagination import ListingQuery
from dairyops.models.common import DashboardResponse, ListingResponse, MessageResponse
from dairyops.models.health import CheckupEditIn, CheckupIn, VaccinationEditIn, VaccinationIn
from dairyops.routes.deps import current_time, listing_query
from dairyops.services.auth.security import get_current_principal
from dairyops.services.health.checkups import (
    add_checkup,
    cattle_checkups,
    checkup_dashboard,
    checkups_for_range,
    delete_checkup,
    edit_checkup,
    list_checkups,
)
from dairyops.services.health.vaccinations import (
    add_vaccination,
    cattle_vaccinations,
    delete_vaccination,
    edit_vaccination,
    list_vaccinations,
    vaccination_dashboard,
    vaccinations_for_range,
)

checkup_router = APIRouter(
    prefix="/checkup", tags=["Checkup"], dependencies=[Depends(get_current_principal)]
)
vaccination_router = APIRouter(
    prefix="/vaccination", tags=["Vaccination"], dependencies=[Depends(get_current_principal)]
)


@checkup_router.post("", status_code=201)
def add_checkup_route(body: CheckupIn, db: Session = Depends(get_db)):
    return add_checkup(db, body)


@checkup_router.get("", response_model=ListingResponse)
def list_checkups_route(
    query: ListingQuery = Depends(listing_query), db: Session = Depends(get_db)
):
    return list_checkups(db, query)


@checkup_router.get("/dashboard", response_model=DashboardResponse)
def checkup_dashboard_route(
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
    now: datetime = Depends(current_time),
    db: Session = Depends(get_db),
):
    return checkup_dashboard(db, now, from_date, to_date)


@checkup_router.get("/cattle/{cattle_name}")
def cattle_checkups_route(cattle_name: str, db: Session = Depends(get_db)):
    return cattle_checkups(db, cattle_name)


@checkup_router.get("/cattle/{cattle_name}/range")
def checkup_range_route(
    cattle_name: str,
    from_date: str = Query(..., alias="fromDate"),
    to_date: str = Query(..., alias="toDate"),
    db: Session = Depends(get_db),
):
    return checkups_for_range(db, cattle_name, from_date, to_date)


@checkup_router.put("/{checkup_id}")
def edit_checkup_route(
    checkup_id: int, body: CheckupEditIn, db: Session = Depends(get_db)
):
    return edit_checkup(db, checkup_id, body)


@checkup_router.delete("/{checkup_id}", response_model=MessageResponse)
def delete_checkup_route(checkup_id: int, db: Session = Depends(get_db)):
    return delete_checkup(db, checkup_id)


@vaccination_router.post("", status_code=201)
def add_vaccination_route(body: VaccinationIn, db: Session = Depends(get_db)):
    return add_vaccination(db, body)


@vaccination_router.get("")
def list_vaccinations_route(
    query: ListingQuery = Depends(listing_query), db: Session = Depends(get_db)
):
    return list_vaccinations(db, query)


@vaccination_router.get("/dashboard", response_model=DashboardResponse)
def vaccination_dashboard_route(
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
    now: datetime = Depends(current_time),
    db: Session = Depends(get_db),
):
    return vaccination_dashboard(db, now, from_date, to_date)


@vaccination_router.get("/cattle/{cattle_name}")
def cattle_vaccinations_route(cattle_name: str, db: Session = Depends(get_db)):
    return cattle_vaccinations(db, cattle_name)


@vaccination_router.get("/cattle/{cattle_name}/range")
def vaccination_range_route(
    cattle_name: str,
    from_date: str = Query(..., alias="fromDate"),
    to_date: str = Query(..., alias="toDate"),
    db: Session = Depends(get_db),
):
    return vaccinations_for_range(db, cattle_name, from_date, to_date)


@vaccination_router.put("/{vaccination_id}")
def edit_vaccination_route(
    vaccination_id: int, body: VaccinationEditIn, db: Session = Depends(get_db)
):
    return edit_vaccination(db, vaccination_id, body)


@vaccination_router.delete("/{vaccination_id}", response_model=MessageResponse)
def delete_vaccination_route(vaccination_id: int, db: Session = Depends(get_db)):
    return delete_vaccination(db, vaccination_id)
