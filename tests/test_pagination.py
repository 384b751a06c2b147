"""
Tests for the listing engine: validation, stage composition, messages and
page arithmetic, exercised through the cattle (replace) and feed stock
(cumulative) listings.
"""

from datetime import date, datetime

import pytest
from sqlalchemy import event

from dairyops.core.errors import InvalidArgumentError
from dairyops.domain.pagination import ListingQuery, run_listing, total_pages
from dairyops.models.enums import CattleBreed, CattleType, HealthStatus, Unit
from dairyops.services.cattle.animals import CATTLE_LISTING, list_cattle
from dairyops.services.feed.stock import list_stock


@pytest.fixture
def herd(make_cattle):
    make_cattle("Kaveri-001", CattleType.COW, CattleBreed.GIR, entered=date(2025, 6, 1))
    make_cattle(
        "Ganga-002",
        CattleType.BUFFALO,
        CattleBreed.MURRAH,
        HealthStatus.INJURED,
        entered=date(2025, 6, 5),
    )
    make_cattle("Yamuna-003", CattleType.GOAT, CattleBreed.JAMUNAPARI, entered=date(2025, 5, 20))


@pytest.fixture
def stocks(make_stock):
    make_stock("Green Fodder", "100", when=datetime(2025, 6, 10))
    make_stock("Dry Fodder", "50", when=datetime(2025, 6, 1))
    make_stock("Molasses", "20", Unit.Litres, when=datetime(2025, 5, 1))


def names(result, key="cattle_name"):
    return [item[key] for item in result["items"]]


class TestValidation:
    """Bad input is rejected before any listing query runs."""

    def test_page_must_be_positive(self, db, now, herd):
        with pytest.raises(InvalidArgumentError, match="Page number"):
            list_cattle(db, ListingQuery(page=0), now)

    def test_unknown_sort_key(self, db, now, herd):
        with pytest.raises(InvalidArgumentError, match="Invalid sort option"):
            list_cattle(db, ListingQuery(sort_by="tallest"), now)

    def test_filter_tokens_are_case_sensitive(self, db, now, herd):
        with pytest.raises(InvalidArgumentError, match="valid filter"):
            list_cattle(db, ListingQuery(filters=["cow"]), now)

    def test_reversed_date_range(self, db, now, herd):
        with pytest.raises(InvalidArgumentError):
            list_cattle(db, ListingQuery(from_date="2025-06-10", to_date="2025-06-01"), now)

    def test_half_open_range_is_ignored(self, db, now, herd):
        result = list_cattle(db, ListingQuery(from_date="2025-06-10"), now)
        assert result["total_count"] == 3
        assert result["message"] == "Showing initial paginated data"


class TestReplaceComposition:
    """Cattle listing: only the last triggered stage applies."""

    def test_initial_page(self, db, now, herd):
        result = list_cattle(db, ListingQuery(), now)
        assert names(result) == ["Ganga-002", "Kaveri-001", "Yamuna-003"]
        assert result["total_count"] == 3
        assert result["total_pages"] == 1
        assert result["message"] == "Showing initial paginated data"

    def test_sort_alone(self, db, now, herd):
        result = list_cattle(db, ListingQuery(sort_by="name-asc"), now)
        assert names(result) == ["Ganga-002", "Kaveri-001", "Yamuna-003"]
        assert result["message"] == "Showing data sorted by name ascending"

    def test_filter_replaces_sort(self, db, now, herd):
        result = list_cattle(db, ListingQuery(sort_by="name-desc", filters=["COW", "GOAT"]), now)
        assert names(result) == ["Kaveri-001", "Yamuna-003"]
        assert result["message"] == "Showing filtered data"

    def test_search_replaces_filter(self, db, now, herd):
        result = list_cattle(db, ListingQuery(filters=["COW"], search="ganga"), now)
        assert names(result) == ["Ganga-002"]
        assert result["message"] == "Showing the searched records based on ganga"

    def test_date_replaces_everything_before_it(self, db, now, herd):
        query = ListingQuery(
            filters=["GOAT"], search="Yamuna", from_date="2025-06-01", to_date="2025-06-05"
        )
        result = list_cattle(db, query, now)
        assert names(result) == ["Ganga-002", "Kaveri-001"]
        assert result["message"] == "Showing filtered data from 2025-06-01 to 2025-06-05"

    def test_tokens_from_several_domains(self, db, now, herd):
        """Tokens group by domain; domains AND together, values within one OR."""
        result = list_cattle(db, ListingQuery(filters=["COW", "BUFFALO", "INJURED"]), now)
        assert names(result) == ["Ganga-002"]

    def test_forced_cumulative_mode(self, db, now, herd, monkeypatch):
        from dairyops.core.configs import settings

        monkeypatch.setattr(settings, "listing_composition", "cumulative")
        result = list_cattle(db, ListingQuery(filters=["COW"], search="ganga"), now)
        assert result["items"] == []


class TestCumulativeComposition:
    """Feed stock listing: every triggered stage narrows the result."""

    def test_filter_and_search_combine(self, db, stocks):
        result = list_stock(db, ListingQuery(filters=["KG"], search="Molasses"))
        assert result["items"] == []
        assert result["total_count"] == 0

    def test_sort_survives_later_stages(self, db, stocks):
        result = list_stock(db, ListingQuery(sort_by="name-asc", filters=["KG"], search="Fodder"))
        assert names(result, "name") == ["Dry Fodder", "Green Fodder"]
        assert result["message"] == "Showing the feed stock based on the Fodder"

    def test_search_treats_wildcards_literally(self, db, stocks, make_stock):
        make_stock("Bran 50% Mix", "5")
        percent = list_stock(db, ListingQuery(search="%"))
        underscore = list_stock(db, ListingQuery(search="_"))
        assert names(percent, "name") == ["Bran 50% Mix"]
        assert underscore["total_count"] == 0

    def test_date_range(self, db, stocks):
        result = list_stock(db, ListingQuery(from_date="2025-06-01", to_date="2025-06-10"))
        assert names(result, "name") == ["Green Fodder", "Dry Fodder"]
        assert result["message"] == (
            "showing the filtered feed stock data from 2025-06-01 to 2025-06-10"
        )


class TestPages:
    def test_total_pages(self):
        assert total_pages(0) == 0
        assert total_pages(25) == 1
        assert total_pages(26) == 2

    def test_second_page(self, db, now, make_cattle):
        for number in range(30):
            make_cattle(f"Cow-{number:03d}")
        first = run_listing(db, CATTLE_LISTING, ListingQuery(page=1, sort_by="name-asc"), now)
        second = run_listing(db, CATTLE_LISTING, ListingQuery(page=2, sort_by="name-asc"), now)

        assert len(first.items) == 25
        assert [item["cattle_name"] for item in second.items] == [
            f"Cow-{number:03d}" for number in range(25, 30)
        ]
        assert second.total_count == 30
        assert second.total_pages == 2

    def test_page_past_the_end_is_empty(self, db, now, herd):
        result = list_cattle(db, ListingQuery(page=3), now)
        assert result["items"] == []
        assert result["total_count"] == 3


class TestQueryBehaviour:
    def test_invalid_input_runs_no_query(self, db, now, herd):
        statements = []

        def record(conn, cursor, statement, *args):
            statements.append(statement)

        engine = db.get_bind()
        event.listen(engine, "before_cursor_execute", record)
        try:
            with pytest.raises(InvalidArgumentError):
                list_cattle(db, ListingQuery(sort_by="tallest"), now)
            with pytest.raises(InvalidArgumentError):
                list_cattle(db, ListingQuery(filters=["ZEBRA"]), now)
        finally:
            event.remove(engine, "before_cursor_execute", record)
        assert statements == []

    def test_single_day_range_is_inclusive(self, db, stocks, make_stock):
        make_stock("Late Hay", "5", when=datetime(2025, 6, 10, 23, 59, 59))
        make_stock("Early Hay", "5", when=datetime(2025, 6, 11, 0, 0))
        result = list_stock(db, ListingQuery(from_date="2025-06-10", to_date="2025-06-10"))
        assert sorted(names(result, "name")) == ["Green Fodder", "Late Hay"]

    def test_repeated_query_is_stable(self, db, now, herd):
        query = ListingQuery(sort_by="name-desc", search="a")
        assert list_cattle(db, query, now) == list_cattle(db, query, now)
