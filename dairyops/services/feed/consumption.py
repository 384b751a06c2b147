from decimal import Decimal
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from dairyops.core.db import unit_of_work
from dairyops.core.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    service_boundary,
)
from dairyops.domain.pagination import (
    Composition,
    ListingConfig,
    ListingMessages,
    ListingQuery,
    SortKey,
    enum_domain,
    run_listing,
)
from dairyops.domain.repository import Repository, ZERO
from dairyops.domain.windows import Window, date_range_window
from dairyops.models.enums import CattleType, FeedSession, FeedType, StockChange, Unit
from dairyops.models.feed import FeedRecordIn, FeedRecordOut
from dairyops.models.schema import Cattle, FeedConsumption, FeedStock, FeedStockHistory
from dairyops.services.cattle.animals import get_cattle_by_name, get_cattle_by_type_and_name
from dairyops.services.feed.stock import record_stock_change
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)

WATER_FEED_NAME = "Water"
SESSION_VALUES = {session.value for session in FeedSession}


def _feed_search(term: str):
    predicates = [
        FeedConsumption.feed_name.icontains(term, autoescape=True),
        Cattle.cattle_name.icontains(term, autoescape=True),
    ]
    if term in SESSION_VALUES:
        predicates.append(FeedConsumption.session == FeedSession(term))
    return or_(*predicates)


FEED_LISTING = ListingConfig(
    entity="feed consumption",
    model=FeedConsumption,
    sort_options={
        SortKey.NAME_ASC: (FeedConsumption.feed_name.asc(), FeedConsumption.id.asc()),
        SortKey.NAME_DESC: (FeedConsumption.feed_name.desc(), FeedConsumption.id.desc()),
        SortKey.NEWEST: (FeedConsumption.date.desc(), FeedConsumption.id.desc()),
        SortKey.OLDEST: (FeedConsumption.date.asc(), FeedConsumption.id.asc()),
    },
    default_order=(FeedConsumption.date.desc(), FeedConsumption.id.desc()),
    filter_domains=[
        enum_domain("session", FeedConsumption.session, FeedSession),
        enum_domain("unit", FeedConsumption.unit, Unit),
        enum_domain("cattle_type", Cattle.type, CattleType),
    ],
    search=_feed_search,
    date_column=FeedConsumption.date,
    messages=ListingMessages(
        initial="Showing initial fetched data",
        sort="Showing sorted data based on {sort_by}",
        filter="Showing filtered data based on {filters}",
        search="Showing the data based on the {search} value",
        date="Showing the feed records from {from_date} to {to_date}",
    ),
    composition=Composition.CUMULATIVE,
    serialize=lambda row: FeedRecordOut.model_validate(row).model_dump(),
    joins=(FeedConsumption.cattle,),
    invalid_sort_message="Please enter a valid query value",
    invalid_filter_message="Please enter a valid session, unit or cattle type",
)


def _find_stock(db: Session, body: FeedRecordIn) -> FeedStock:
    if not body.feed_name:
        raise InvalidArgumentError("Feed name is required for feed records")
    stock = Repository(db, FeedStock).find_one(
        FeedStock.name == body.feed_name, FeedStock.unit == body.unit
    )
    if stock is None:
        raise NotFoundError("No feed stock found with the name")
    return stock


def _consumption_values(body: FeedRecordIn, cattle: Cattle) -> dict:
    if body.feed_type is FeedType.WATER:
        feed_name, unit = WATER_FEED_NAME, Unit.Litres
    else:
        feed_name, unit = body.feed_name, body.unit
    return {
        "cattle_id": cattle.id,
        "feed_name": feed_name,
        "feed_type": body.feed_type,
        "session": body.session,
        "quantity": body.quantity,
        "unit": unit,
        "date": body.date,
    }


def _get_record(db: Session, record_id: int, message: str) -> FeedConsumption:
    record = Repository(db, FeedConsumption).find_one(FeedConsumption.id == record_id)
    if record is None:
        raise NotFoundError(message)
    return record


@service_boundary
def add_feed_record(db: Session, body: FeedRecordIn) -> dict:
    """
    Record water or feed given to one animal.

    Feed draws from the matching stock line: the consumption row, the stock
    decrement and the "Consumed" ledger row are written in one transaction.

    Raises:
        NotFoundError: unknown cattle or stock line
        ConflictError: quantity exceeds what the stock line holds
    """
    cattle = get_cattle_by_type_and_name(db, body.type, body.cattle_name)
    consumptions = Repository(db, FeedConsumption)

    if body.feed_type is FeedType.WATER:
        with unit_of_work(db):
            record = consumptions.create(**_consumption_values(body, cattle))
        logger.info(f"Added water record {record.id} for {cattle.cattle_name}")
        return {"message": "New water consumption record added successfully!", "id": record.id}

    stock = _find_stock(db, body)
    if body.quantity > stock.quantity:
        logger.warning(
            f"Rejected feed record for {cattle.cattle_name}: {body.quantity} > {stock.quantity}"
        )
        raise ConflictError(
            f"Requested quantity exceeds the available stock of {stock.name} ({stock.quantity})"
        )

    with unit_of_work(db):
        record = consumptions.create(**_consumption_values(body, cattle))
        Repository(db, FeedStock).update(stock, quantity=stock.quantity - body.quantity)
        record_stock_change(db, stock, StockChange.Consumed, consumption_id=record.id)

    logger.info(f"Added feed record {record.id}, {stock.name} left: {stock.quantity}")
    return {"message": "New feed consumption record added successfully!", "id": record.id}


@service_boundary
def list_feed_records(db: Session, query: ListingQuery) -> dict:
    return run_listing(db, FEED_LISTING, query).to_dict()


@service_boundary
def cattle_feed_records(db: Session, cattle_name: str) -> dict:
    cattle = get_cattle_by_name(db, cattle_name, "No animal found with the cattle name")
    repository = Repository(db, FeedConsumption)
    rows = repository.find_many(
        FeedConsumption.cattle_id == cattle.id,
        order_by=(FeedConsumption.date.desc(), FeedConsumption.id.desc()),
    )

    def average(feed_type: FeedType) -> Decimal:
        value = repository.aggregate_average(
            [FeedConsumption.quantity],
            FeedConsumption.cattle_id == cattle.id,
            FeedConsumption.feed_type == feed_type,
        )["quantity"]
        return value if value is not None else ZERO

    return {
        "message": f"Showing the details of the cattle {cattle_name}",
        "average_water": average(FeedType.WATER),
        "average_feed": average(FeedType.FEED),
        "records": [FeedRecordOut.model_validate(row).model_dump() for row in rows],
    }


@service_boundary
def edit_feed_record(db: Session, record_id: int, body: FeedRecordIn) -> dict:
    """
    Edit a consumption record and reconcile the stock it drew from.

    The old quantity is returned to its stock line before the new quantity is
    taken, so editing within the same line only needs
    new quantity <= old quantity + current stock.
    """
    record = _get_record(db, record_id, "No record found with the id")
    if record.cattle.cattle_name != body.cattle_name:
        raise InvalidArgumentError("Cattle name does not match the feed record")
    cattle = get_cattle_by_type_and_name(db, body.type, body.cattle_name)

    entry: Optional[FeedStockHistory] = record.stock_entry
    old_stock = entry.feed_stock if entry is not None else None
    new_stock = None
    if body.feed_type is FeedType.FEED:
        new_stock = _find_stock(db, body)
        available = new_stock.quantity
        if old_stock is not None and old_stock.id == new_stock.id:
            available += record.quantity
        if body.quantity > available:
            raise ConflictError(
                f"Requested quantity exceeds the available stock of {new_stock.name} ({available})"
            )

    stocks = Repository(db, FeedStock)
    history = Repository(db, FeedStockHistory)
    with unit_of_work(db):
        if old_stock is not None:
            stocks.update(old_stock, quantity=old_stock.quantity + record.quantity)
            if new_stock is None or new_stock.id != old_stock.id:
                record.stock_entry = None
                history.delete(entry)
                record_stock_change(db, old_stock, StockChange.Added)
                entry = None

        consumptions = Repository(db, FeedConsumption)
        consumptions.update(record, **_consumption_values(body, cattle))

        if new_stock is not None:
            stocks.update(new_stock, quantity=new_stock.quantity - body.quantity)
            if entry is not None:
                history.update(entry, new_quantity=new_stock.quantity)
            else:
                record_stock_change(db, new_stock, StockChange.Consumed, consumption_id=record.id)

    logger.info(f"Updated feed record {record_id}")
    if body.feed_type is FeedType.WATER:
        return {"message": "Water consumption record updated successfully!", "id": record.id}
    return {"message": "feed consumption record updated successfully!", "id": record.id}


@service_boundary
def delete_feed_record(db: Session, record_id: int) -> dict:
    """Delete a consumption record, returning its quantity to stock when it drew from one."""
    record = _get_record(db, record_id, "No record found with the given id")
    entry = record.stock_entry
    is_water = record.feed_type is FeedType.WATER

    with unit_of_work(db):
        Repository(db, FeedConsumption).delete(record)
        if entry is not None:
            stock = entry.feed_stock
            Repository(db, FeedStock).update(stock, quantity=stock.quantity + record.quantity)
            Repository(db, FeedStockHistory).delete(entry)

    logger.info(f"Deleted feed record {record_id}")
    if is_water:
        return {"message": "Water record deleted successfully"}
    return {"message": "Feed record deleted successfully!"}


@service_boundary
def feed_records_for_range(
    db: Session, cattle_name: str, from_date: str, to_date: str
) -> dict:
    window: Window = date_range_window(from_date, to_date)
    cattle = get_cattle_by_name(db, cattle_name, "No animal found with the cattle name")
    rows = Repository(db, FeedConsumption).find_many(
        FeedConsumption.cattle_id == cattle.id,
        window.contains(FeedConsumption.date),
        order_by=(FeedConsumption.date.desc(), FeedConsumption.id.desc()),
    )
    return {
        "message": f"Showing all feed records for {from_date} to {to_date}",
        "records": [FeedRecordOut.model_validate(row).model_dump() for row in rows],
    }
