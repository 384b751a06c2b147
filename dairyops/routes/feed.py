from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dairyops.core.db import get_db
from dairyops.domain.pagination import ListingQuery
from dairyops.models.common import ListingResponse, MessageResponse
from dairyops.models.feed import FeedRecordIn, FeedStockIn
from dairyops.routes.deps import listing_query
from dairyops.services.auth.security import get_current_principal
from dairyops.services.feed.consumption import (
    add_feed_record,
    cattle_feed_records,
    delete_feed_record,
    edit_feed_record,
    feed_records_for_range,
    list_feed_records,
)
from dairyops.services.feed.stock import (
    add_stock,
    available_stock_names,
    list_stock,
    stock_history,
)

router = APIRouter(
    prefix="/feed-management",
    tags=["Feed Management"],
    dependencies=[Depends(get_current_principal)],
)
stock_router = APIRouter(
    prefix="/feed-stock", tags=["Feed Stock"], dependencies=[Depends(get_current_principal)]
)


@router.post("", status_code=201)
def add_feed_record_route(body: FeedRecordIn, db: Session = Depends(get_db)):
    return add_feed_record(db, body)


@router.get("", response_model=ListingResponse)
def list_feed_records_route(
    query: ListingQuery = Depends(listing_query), db: Session = Depends(get_db)
):
    return list_feed_records(db, query)


@router.get("/cattle/{cattle_name}")
def cattle_feed_records_route(cattle_name: str, db: Session = Depends(get_db)):
    return cattle_feed_records(db, cattle_name)


@router.get("/cattle/{cattle_name}/range")
def feed_range_route(
    cattle_name: str,
    from_date: str = Query(..., alias="fromDate"),
    to_date: str = Query(..., alias="toDate"),
    db: Session = Depends(get_db),
):
    return feed_records_for_range(db, cattle_name, from_date, to_date)


@router.put("/{record_id}")
def edit_feed_record_route(
    record_id: int, body: FeedRecordIn, db: Session = Depends(get_db)
):
    return edit_feed_record(db, record_id, body)


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_feed_record_route(record_id: int, db: Session = Depends(get_db)):
    return delete_feed_record(db, record_id)


@stock_router.post("", status_code=201)
def add_stock_route(body: FeedStockIn, db: Session = Depends(get_db)):
    return add_stock(db, body)


@stock_router.get("", response_model=ListingResponse)
def list_stock_route(
    query: ListingQuery = Depends(listing_query), db: Session = Depends(get_db)
):
    return list_stock(db, query)


@stock_router.get("/available")
def available_stock_route(db: Session = Depends(get_db)):
    return available_stock_names(db)


@stock_router.get("/{stock_id}/history")
def stock_history_route(stock_id: int, db: Session = Depends(get_db)):
    return stock_history(db, stock_id)
