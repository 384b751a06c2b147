from sqlalchemy.orm import Session

from dairyops.core.db import unit_of_work
from dairyops.core.errors import NotFoundError, service_boundary
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
from dairyops.models.enums import StockChange, Unit
from dairyops.models.feed import FeedStockHistoryOut, FeedStockIn, FeedStockOut
from dairyops.models.schema import FeedStock, FeedStockHistory
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)


FEED_STOCK_LISTING = ListingConfig(
    entity="feed stock",
    model=FeedStock,
    sort_options={
        SortKey.NAME_ASC: (FeedStock.name.asc(), FeedStock.id.asc()),
        SortKey.NAME_DESC: (FeedStock.name.desc(), FeedStock.id.desc()),
        SortKey.NEWEST: (FeedStock.date.desc(), FeedStock.id.desc()),
        SortKey.OLDEST: (FeedStock.date.asc(), FeedStock.id.asc()),
    },
    default_order=(FeedStock.date.desc(), FeedStock.id.desc()),
    filter_domains=[enum_domain("unit", FeedStock.unit, Unit)],
    search=lambda term: FeedStock.name.icontains(term, autoescape=True),
    date_column=FeedStock.date,
    messages=ListingMessages(
        initial="showing initial feed stock data",
        sort="showing the sorted feed stock data based on {sort_by}",
        filter="showing the filtered data based on {filters}",
        search="Showing the feed stock based on the {search}",
        date="showing the filtered feed stock data from {from_date} to {to_date}",
    ),
    composition=Composition.CUMULATIVE,
    serialize=lambda row: FeedStockOut.model_validate(row).model_dump(),
    invalid_filter_message="please enter a valid feed stock unit",
)


def record_stock_change(
    db: Session, stock: FeedStock, change: StockChange, consumption_id=None
) -> FeedStockHistory:
    """Append one ledger row carrying the stock's balance after the change."""
    return Repository(db, FeedStockHistory).create(
        feed_stock_id=stock.id,
        consumption_id=consumption_id,
        type=change,
        new_quantity=stock.quantity,
    )


@service_boundary
def add_stock(db: Session, body: FeedStockIn) -> dict:
    """
    Restock a feed line.

    An existing line with the same name and unit is topped up; otherwise a
    new line is opened. Either way one "Added" history row is written.
    """
    repository = Repository(db, FeedStock)
    with unit_of_work(db):
        stock = repository.find_one(FeedStock.name == body.name, FeedStock.unit == body.unit)
        if stock is not None:
            repository.update(
                stock,
                quantity=stock.quantity + body.quantity,
                notes=body.notes or stock.notes,
                date=body.date,
            )
            message = "Feed stock updated successfully!"
        else:
            stock = repository.create(
                name=body.name,
                unit=body.unit,
                quantity=body.quantity,
                notes=body.notes,
                date=body.date,
            )
            message = "New feed stock added successfully!"
        record_stock_change(db, stock, StockChange.Added)

    logger.info(f"Feed stock {stock.name} ({stock.unit.value}) now at {stock.quantity}")
    return {"message": message, "stock": FeedStockOut.model_validate(stock).model_dump()}


@service_boundary
def list_stock(db: Session, query: ListingQuery) -> dict:
    return run_listing(db, FEED_STOCK_LISTING, query).to_dict()


@service_boundary
def stock_history(db: Session, stock_id: int) -> dict:
    stock = Repository(db, FeedStock).find_one(FeedStock.id == stock_id)
    if stock is None:
        raise NotFoundError("No feed stock found with the given id")

    rows = Repository(db, FeedStockHistory).find_many(
        FeedStockHistory.feed_stock_id == stock.id,
        order_by=(FeedStockHistory.created_at.desc(), FeedStockHistory.id.desc()),
    )
    return {
        "message": f"Showing all history of feed {stock.name}",
        "history": [FeedStockHistoryOut.model_validate(row).model_dump() for row in rows],
    }


@service_boundary
def available_stock_names(db: Session) -> dict:
    rows = Repository(db, FeedStock).find_many(
        FeedStock.quantity > 0, order_by=(FeedStock.name.asc(),)
    )
    return {
        "message": "Showing all the stock names quantity greater than 0",
        "stocks": [
            {"id": row.id, "name": row.name, "unit": row.unit, "quantity": row.quantity}
            for row in rows
        ],
    }
