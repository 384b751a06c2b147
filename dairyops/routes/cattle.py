from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dairyops.core.db import get_db
from dairyops.domain.pagination import ListingQuery
from dairyops.models.cattle import CalfIn, CattleIn
from dairyops.models.common import DashboardResponse, ListingResponse, MessageResponse
from dairyops.models.enums import CattleType
from dairyops.routes.deps import current_time, listing_query
from dairyops.services.auth.security import SUPER_ADMIN, get_current_principal
from dairyops.services.cattle.animals import (
    active_cattle_names,
    add_calf,
    add_cattle,
    cattle_details,
    checkup_history,
    delete_cattle,
    feed_history,
    generate_calf_id,
    generate_cattle_id,
    list_calves,
    list_cattle,
    milk_history,
    update_cattle,
)
from dairyops.services.cattle.dashboard import (
    checkup_graph,
    dashboard_checkup_records,
    dashboard_feed_stock_records,
    top_section_dashboard,
)

router = APIRouter(
    prefix="/animal", tags=["Cattle"], dependencies=[Depends(get_current_principal)]
)


@router.post("", status_code=201)
def add_cattle_route(
    body: CattleIn,
    principal: dict = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    user_id = int(principal["sub"]) if principal["user_type"] == SUPER_ADMIN else None
    return add_cattle(db, body, user_id)


@router.get("", response_model=ListingResponse)
def list_cattle_route(
    query: ListingQuery = Depends(listing_query),
    now: datetime = Depends(current_time),
    db: Session = Depends(get_db),
):
    return list_cattle(db, query, now)


@router.get("/names")
def cattle_names_route(
    type: Optional[CattleType] = None, db: Session = Depends(get_db)
):
    return active_cattle_names(db, type)


@router.get("/generate-id")
def generate_cattle_id_route(type: str, db: Session = Depends(get_db)):
    return generate_cattle_id(db, type)


@router.get("/dashboard/top-section", response_model=DashboardResponse)
def top_section_route(
    query: Optional[str] = None,
    date: Optional[str] = None,
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
    now: datetime = Depends(current_time),
    db: Session = Depends(get_db),
):
    """Trend cards for a period token (`query`), a single `date` or a `fromDate`/`toDate` range."""
    return top_section_dashboard(db, now, query, date, from_date, to_date)


@router.get("/dashboard/checkups")
def dashboard_checkups_route(db: Session = Depends(get_db)):
    return dashboard_checkup_records(db)


@router.get("/dashboard/checkup-graph")
def checkup_graph_route(
    query: str, now: datetime = Depends(current_time), db: Session = Depends(get_db)
):
    return checkup_graph(db, now, query)


@router.get("/dashboard/feed-stock")
def dashboard_feed_stock_route(
    query: str, now: datetime = Depends(current_time), db: Session = Depends(get_db)
):
    return dashboard_feed_stock_records(db, now, query)


@router.post("/calf", status_code=201)
def add_calf_route(body: CalfIn, db: Session = Depends(get_db)):
    return add_calf(db, body)


@router.get("/calf/generate-id")
def generate_calf_id_route(type: str, db: Session = Depends(get_db)):
    return generate_calf_id(db, type)


@router.get("/{cattle_name}")
def cattle_details_route(cattle_name: str, db: Session = Depends(get_db)):
    return cattle_details(db, cattle_name)


@router.put("/{cattle_name}")
def update_cattle_route(
    cattle_name: str, body: CattleIn, db: Session = Depends(get_db)
):
    return update_cattle(db, cattle_name, body)


@router.delete("/{cattle_name}", response_model=MessageResponse)
def delete_cattle_route(cattle_name: str, db: Session = Depends(get_db)):
    return delete_cattle(db, cattle_name)


@router.get("/{cattle_name}/calves")
def list_calves_route(cattle_name: str, db: Session = Depends(get_db)):
    return list_calves(db, cattle_name)


@router.get("/{cattle_name}/history/feed")
def feed_history_route(cattle_name: str, page: int = 1, db: Session = Depends(get_db)):
    return feed_history(db, cattle_name, page)


@router.get("/{cattle_name}/history/milk")
def milk_history_route(cattle_name: str, page: int = 1, db: Session = Depends(get_db)):
    return milk_history(db, cattle_name, page)


@router.get("/{cattle_name}/history/checkup")
def checkup_history_route(
    cattle_name: str, page: int = 1, db: Session = Depends(get_db)
):
    return checkup_history(db, cattle_name, page)
