"""
Tests for feed consumption and the stock ledger.

Every feed record draws from a stock line; the tests check that the stock
balance and its history stay consistent through add, edit and delete.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from dairyops.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from dairyops.domain.pagination import ListingQuery
from dairyops.models.enums import (
    CattleType,
    FeedSession,
    FeedType,
    StockChange,
    Unit,
)
from dairyops.models.feed import FeedRecordIn
from dairyops.models.schema import FeedConsumption, FeedStock, FeedStockHistory
from dairyops.services.feed.consumption import (
    add_feed_record,
    cattle_feed_records,
    delete_feed_record,
    edit_feed_record,
    feed_records_for_range,
    list_feed_records,
)
from dairyops.services.feed.stock import available_stock_names, stock_history


def feed(quantity, feed_name="Green Fodder", feed_type=FeedType.FEED, **overrides):
    values = dict(
        cattle_name="Kaveri-001",
        type=CattleType.COW,
        feed_type=feed_type,
        feed_name=feed_name,
        session=FeedSession.MORNING,
        quantity=Decimal(quantity),
        unit=Unit.KG,
        date=datetime(2025, 6, 14, 7),
    )
    values.update(overrides)
    return FeedRecordIn(**values)


def stock_named(db, name):
    return db.query(FeedStock).filter(FeedStock.name == name).one()


def ledger(db, name):
    stock = stock_named(db, name)
    rows = (
        db.query(FeedStockHistory)
        .filter(FeedStockHistory.feed_stock_id == stock.id)
        .order_by(FeedStockHistory.id)
        .all()
    )
    return [(row.type, row.new_quantity) for row in rows]


@pytest.fixture
def barn(make_cattle, make_stock):
    make_cattle("Kaveri-001")
    make_stock("Green Fodder", "100")
    make_stock("Dry Fodder", "40")


class TestStock:
    def test_restock_tops_up_existing_line(self, db, make_stock):
        make_stock("Green Fodder", "100")
        make_stock("Green Fodder", "25")
        assert db.query(FeedStock).count() == 1
        assert stock_named(db, "Green Fodder").quantity == Decimal("125")
        assert ledger(db, "Green Fodder") == [
            (StockChange.Added, Decimal("100")),
            (StockChange.Added, Decimal("125")),
        ]

    def test_same_name_other_unit_is_a_new_line(self, db, make_stock):
        make_stock("Molasses", "10", Unit.KG)
        make_stock("Molasses", "10", Unit.Litres)
        assert db.query(FeedStock).count() == 2

    def test_history_of_unknown_stock(self, db):
        with pytest.raises(NotFoundError):
            stock_history(db, 99)

    def test_available_names_skip_empty_lines(self, db, barn):
        add_feed_record(db, feed("40", feed_name="Dry Fodder"))
        names = [stock["name"] for stock in available_stock_names(db)["stocks"]]
        assert names == ["Green Fodder"]


class TestAddFeed:
    def test_feed_draws_from_stock(self, db, barn):
        result = add_feed_record(db, feed("30"))
        assert result["message"] == "New feed consumption record added successfully!"
        assert stock_named(db, "Green Fodder").quantity == Decimal("70")

        entry = db.query(FeedStockHistory).filter(
            FeedStockHistory.consumption_id == result["id"]
        ).one()
        assert entry.type is StockChange.Consumed
        assert entry.new_quantity == Decimal("70")

    def test_exceeding_stock_conflicts_without_writing(self, db, barn):
        with pytest.raises(ConflictError):
            add_feed_record(db, feed("100.01"))
        assert db.query(FeedConsumption).count() == 0
        assert stock_named(db, "Green Fodder").quantity == Decimal("100")
        assert len(ledger(db, "Green Fodder")) == 1

    def test_whole_stock_can_be_used(self, db, barn):
        add_feed_record(db, feed("100"))
        assert stock_named(db, "Green Fodder").quantity == 0

    def test_water_does_not_touch_stock(self, db, barn):
        result = add_feed_record(db, feed("12", feed_name=None, feed_type=FeedType.WATER))
        assert result["message"] == "New water consumption record added successfully!"

        record = db.query(FeedConsumption).one()
        assert record.feed_name == "Water"
        assert record.unit is Unit.Litres
        assert db.query(FeedStockHistory).filter(
            FeedStockHistory.type == StockChange.Consumed
        ).count() == 0

    def test_feed_needs_a_name(self, db, barn):
        with pytest.raises(InvalidArgumentError):
            add_feed_record(db, feed("5", feed_name=None))

    def test_unknown_stock(self, db, barn):
        with pytest.raises(NotFoundError):
            add_feed_record(db, feed("5", feed_name="Silage"))

    def test_cattle_type_must_match(self, db, barn):
        with pytest.raises(NotFoundError):
            add_feed_record(db, feed("5", type=CattleType.GOAT))


class TestEditFeed:
    def test_same_stock_counts_old_quantity_as_available(self, db, barn):
        record_id = add_feed_record(db, feed("80"))["id"]
        # 20 left in stock, but the 80 already drawn comes back first
        edit_feed_record(db, record_id, feed("95"))

        assert stock_named(db, "Green Fodder").quantity == Decimal("5")
        entries = db.query(FeedStockHistory).filter(
            FeedStockHistory.consumption_id == record_id
        ).all()
        assert len(entries) == 1
        assert entries[0].new_quantity == Decimal("5")

    def test_same_stock_over_the_limit(self, db, barn):
        record_id = add_feed_record(db, feed("80"))["id"]
        with pytest.raises(ConflictError):
            edit_feed_record(db, record_id, feed("101"))
        assert stock_named(db, "Green Fodder").quantity == Decimal("20")

    def test_switching_stock_returns_quantity_to_the_old_line(self, db, barn):
        record_id = add_feed_record(db, feed("30"))["id"]
        edit_feed_record(db, record_id, feed("10", feed_name="Dry Fodder"))

        assert stock_named(db, "Green Fodder").quantity == Decimal("100")
        assert stock_named(db, "Dry Fodder").quantity == Decimal("30")
        assert ledger(db, "Green Fodder") == [
            (StockChange.Added, Decimal("100")),
            (StockChange.Added, Decimal("100")),
        ]
        assert ledger(db, "Dry Fodder")[-1] == (StockChange.Consumed, Decimal("30"))

    def test_switching_to_water_drops_the_ledger_link(self, db, barn):
        record_id = add_feed_record(db, feed("30"))["id"]
        result = edit_feed_record(
            db, record_id, feed("8", feed_name=None, feed_type=FeedType.WATER)
        )

        assert result["message"] == "Water consumption record updated successfully!"
        assert stock_named(db, "Green Fodder").quantity == Decimal("100")
        assert db.query(FeedStockHistory).filter(
            FeedStockHistory.consumption_id == record_id
        ).count() == 0
        assert db.get(FeedConsumption, record_id).feed_name == "Water"

    def test_water_to_feed_starts_drawing_stock(self, db, barn):
        record_id = add_feed_record(
            db, feed("8", feed_name=None, feed_type=FeedType.WATER)
        )["id"]
        edit_feed_record(db, record_id, feed("10"))
        assert stock_named(db, "Green Fodder").quantity == Decimal("90")
        assert ledger(db, "Green Fodder")[-1] == (StockChange.Consumed, Decimal("90"))

    def test_cattle_name_must_match(self, db, barn, make_cattle):
        make_cattle("Ganga-002")
        record_id = add_feed_record(db, feed("10"))["id"]
        with pytest.raises(InvalidArgumentError):
            edit_feed_record(db, record_id, feed("10", cattle_name="Ganga-002"))

    def test_unknown_record(self, db, barn):
        with pytest.raises(NotFoundError):
            edit_feed_record(db, 404, feed("10"))


class TestDeleteFeed:
    def test_delete_restores_stock(self, db, barn):
        record_id = add_feed_record(db, feed("30"))["id"]
        result = delete_feed_record(db, record_id)

        assert result["message"] == "Feed record deleted successfully!"
        assert stock_named(db, "Green Fodder").quantity == Decimal("100")
        assert ledger(db, "Green Fodder") == [(StockChange.Added, Decimal("100"))]
        assert db.query(FeedConsumption).count() == 0

    def test_delete_water(self, db, barn):
        record_id = add_feed_record(
            db, feed("8", feed_name=None, feed_type=FeedType.WATER)
        )["id"]
        assert delete_feed_record(db, record_id)["message"] == "Water record deleted successfully"


class TestQueries:
    def test_cattle_averages(self, db, barn):
        add_feed_record(db, feed("10"))
        add_feed_record(db, feed("20"))
        add_feed_record(db, feed("6", feed_name=None, feed_type=FeedType.WATER))

        result = cattle_feed_records(db, "Kaveri-001")
        assert result["average_feed"] == Decimal("15")
        assert result["average_water"] == Decimal("6")
        assert len(result["records"]) == 3

    def test_listing_combines_filter_and_search(self, db, barn):
        add_feed_record(db, feed("10"))
        add_feed_record(db, feed("10", feed_name="Dry Fodder", session=FeedSession.EVENING))
        add_feed_record(db, feed("6", feed_name=None, feed_type=FeedType.WATER))

        result = list_feed_records(db, ListingQuery(filters=["KG"], search="Dry"))
        assert [item["feed_name"] for item in result["items"]] == ["Dry Fodder"]

        result = list_feed_records(db, ListingQuery(search="EVENING"))
        assert [item["feed_name"] for item in result["items"]] == ["Dry Fodder"]
        assert result["message"] == "Showing the data based on the EVENING value"

    def test_range(self, db, barn):
        add_feed_record(db, feed("10", date=datetime(2025, 6, 1, 7)))
        add_feed_record(db, feed("10", date=datetime(2025, 6, 14, 7)))
        result = feed_records_for_range(db, "Kaveri-001", "2025-06-10", "2025-06-15")
        assert len(result["records"]) == 1
