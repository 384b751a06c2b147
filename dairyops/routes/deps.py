from datetime import datetime
from typing import Callable, Optional

from fastapi import Depends, Query

from dairyops.core.clock import get_clock
from dairyops.domain.pagination import ListingQuery


def listing_query(
    page: int = 1,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    filters: list[str] = Query([], alias="filter"),
    search: Optional[str] = None,
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
) -> ListingQuery:
    """Query string shared by every paginated listing."""
    return ListingQuery(
        page=page,
        sort_by=sort_by,
        filters=filters,
        search=search,
        from_date=from_date,
        to_date=to_date,
    )


def current_time(clock: Callable[[], datetime] = Depends(get_clock)) -> datetime:
    return clock()
