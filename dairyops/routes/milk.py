from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dairyops.core.db import get_db
from dairyops.domain.pagination import ListingQuery
from dairyops.models.common import DashboardResponse, ListingResponse
from dairyops.models.milk import MilkRecordIn, MonthlyProductionResponse
from dairyops.routes.deps import current_time, listing_query
from dairyops.services.auth.security import get_current_principal
from dairyops.services.milk.dashboard import milk_dashboard
from dairyops.services.milk.records import (
    add_milk_record,
    cattle_milk_records,
    delete_milk_record,
    list_milk_records,
    milk_records_for_range,
    monthly_production_report,
    update_milk_record,
)

router = APIRouter(prefix="/milk", tags=["Milk"], dependencies=[Depends(get_current_principal)])


@router.post("", status_code=201)
def add_milk_record_route(body: MilkRecordIn, db: Session = Depends(get_db)):
    return add_milk_record(db, body)


@router.get("", response_model=ListingResponse)
def list_milk_records_route(
    query: ListingQuery = Depends(listing_query), db: Session = Depends(get_db)
):
    return list_milk_records(db, query)


@router.get("/dashboard", response_model=DashboardResponse)
def milk_dashboard_route(
    query: Optional[str] = None,
    date: Optional[str] = None,
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
    now: datetime = Depends(current_time),
    db: Session = Depends(get_db),
):
    """Milk cards for a session (`query`), a `date` or a `fromDate`/`toDate` range."""
    return milk_dashboard(db, now, query, date, from_date, to_date)


@router.get("/report/monthly", response_model=MonthlyProductionResponse)
def monthly_report_route(
    query: str = "Overall", now: datetime = Depends(current_time), db: Session = Depends(get_db)
):
    return monthly_production_report(db, now, query)


@router.get("/cattle/{cattle_name}")
def cattle_milk_records_route(cattle_name: str, db: Session = Depends(get_db)):
    return cattle_milk_records(db, cattle_name)


@router.get("/cattle/{cattle_name}/range")
def milk_range_route(
    cattle_name: str,
    from_date: str = Query(..., alias="fromDate"),
    to_date: str = Query(..., alias="toDate"),
    db: Session = Depends(get_db),
):
    return milk_records_for_range(db, cattle_name, from_date, to_date)


@router.put("/{record_id}")
def update_milk_record_route(
    record_id: int, body: MilkRecordIn, db: Session = Depends(get_db)
):
    return update_milk_record(db, record_id, body)


@router.delete("/{record_id}")
def delete_milk_record_route(record_id: int, db: Session = Depends(get_db)):
    return delete_milk_record(db, record_id)
