"""
Paginated query engine shared by every listing endpoint.

A listing is described once per entity by a `ListingConfig`: which sort keys
it accepts, which categorical filter domains a token may belong to, how the
free-text search predicate is built, which column a date range restricts and
which status message each stage produces. `run_listing` validates the whole
query up front, then applies the stages in the fixed order
sort -> filter -> search -> date range.

How the stages combine is per entity. REPLACE entities execute only the
predicate of the last triggered stage (sorting is honoured only when sort is
that last stage). CUMULATIVE entities AND every triggered predicate and keep
the requested sort order.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from math import ceil
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from sqlalchemy import and_
from sqlalchemy.orm import Session

from dairyops.core.configs import settings
from dairyops.core.errors import InvalidArgumentError
from dairyops.domain.repository import Repository
from dairyops.domain.windows import Window, date_range_window
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)

PAGE_SIZE = 25


class SortKey(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"


class Composition(str, Enum):
    REPLACE = "replace"
    CUMULATIVE = "cumulative"


class Stage(str, Enum):
    SORT = "sort"
    FILTER = "filter"
    SEARCH = "search"
    DATE = "date"


STAGE_ORDER = (Stage.SORT, Stage.FILTER, Stage.SEARCH, Stage.DATE)


@dataclass(frozen=True)
class FilterDomain:
    """
    One categorical axis a filter token can match.

    `values` is either a static list of accepted tokens or a callable
    returning them from the database. `convert` turns an accepted token into
    the value compared against `column`.
    """

    name: str
    column: Any
    values: Union[Sequence[str], Callable[[Session], Iterable[str]]]
    convert: Callable[[str], Any] = str

    def accepted(self, db: Session) -> set[str]:
        values = self.values(db) if callable(self.values) else self.values
        return set(values)


def enum_domain(name: str, column, enum_cls) -> FilterDomain:
    return FilterDomain(
        name=name,
        column=column,
        values=[member.value for member in enum_cls],
        convert=enum_cls,
    )


@dataclass(frozen=True)
class ListingMessages:
    """
    Message templates, formatted with the keyword arguments
    `sort_by`, `filters`, `search`, `from_date` and `to_date`.

    `sort` may map individual sort keys to their own wording.
    """

    initial: str
    sort: Union[str, Mapping[SortKey, str]]
    filter: str
    search: str
    date: str
    filter_and_date: Optional[str] = None


@dataclass
class ListingConfig:
    entity: str
    model: Any
    sort_options: Mapping[SortKey, Sequence[Any]]
    default_order: Sequence[Any]
    filter_domains: Sequence[FilterDomain]
    search: Callable[[str], Any]
    date_column: Any
    messages: ListingMessages
    composition: Composition = Composition.CUMULATIVE
    serialize: Callable[[Any], dict] = lambda row: {"id": row.id}
    enrich: Optional[Callable[[Session, list, list[dict], datetime], None]] = None
    joins: Sequence[Any] = ()
    invalid_sort_message: str = "Please enter a valid sortBy value"
    invalid_filter_message: str = "Please enter a valid filter value"
    message_order: Sequence[Stage] = STAGE_ORDER


@dataclass
class ListingQuery:
    page: int = 1
    sort_by: Optional[str] = None
    filters: list[str] = field(default_factory=list)
    search: Optional[str] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None


@dataclass
class ListingResult:
    message: str
    items: list[dict]
    total_count: int
    total_pages: int

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "items": self.items,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
        }


def total_pages(total_count: int, page_size: int = PAGE_SIZE) -> int:
    return ceil(total_count / page_size)


def _parse_sort(config: ListingConfig, sort_by: Optional[str]) -> Optional[SortKey]:
    if not sort_by:
        return None
    try:
        key = SortKey(sort_by)
    except ValueError:
        raise InvalidArgumentError(config.invalid_sort_message)
    if key not in config.sort_options:
        raise InvalidArgumentError(config.invalid_sort_message)
    return key


def _filter_predicates(
    db: Session, config: ListingConfig, tokens: Sequence[str]
) -> list[Any]:
    """Assign each token to the first domain accepting it, then IN per domain."""
    domains = [(domain, domain.accepted(db)) for domain in config.filter_domains]
    grouped: dict[str, list[Any]] = {}
    for token in tokens:
        for domain, accepted in domains:
            if token in accepted:
                grouped.setdefault(domain.name, []).append(domain.convert(token))
                break
        else:
            raise InvalidArgumentError(config.invalid_filter_message)

    return [
        domain.column.in_(grouped[domain.name])
        for domain, _ in domains
        if domain.name in grouped
    ]


def _message(
    config: ListingConfig,
    triggered: dict[Stage, bool],
    sort_key: Optional[SortKey],
    params: dict,
) -> str:
    messages = config.messages
    if messages.filter_and_date and triggered[Stage.FILTER] and triggered[Stage.DATE]:
        return messages.filter_and_date.format(**params)

    last = None
    for stage in config.message_order:
        if triggered[stage]:
            last = stage
    if last is None:
        return messages.initial.format(**params)
    if last is Stage.SORT:
        if isinstance(messages.sort, Mapping):
            return messages.sort[sort_key].format(**params)
        return messages.sort.format(**params)
    if last is Stage.FILTER:
        return messages.filter.format(**params)
    if last is Stage.SEARCH:
        return messages.search.format(**params)
    return messages.date.format(**params)


def run_listing(
    db: Session,
    config: ListingConfig,
    query: ListingQuery,
    now: Optional[datetime] = None,
    scope: Sequence[Any] = (),
) -> ListingResult:
    """
    Execute one page of a listing.

    `scope` criteria restrict every query regardless of composition, e.g. the
    employees of one role.

    Raises:
        InvalidArgumentError: bad page, sort key, filter token or date, raised
            before any listing query runs
    """
    if query.page is None or query.page < 1:
        raise InvalidArgumentError("Page number must be 1 or greater")

    sort_key = _parse_sort(config, query.sort_by)
    filters = [token for token in (query.filters or []) if token]
    filter_predicates = _filter_predicates(db, config, filters) if filters else []
    search = query.search.strip() if query.search and query.search.strip() else None
    window: Optional[Window] = None
    if query.from_date and query.to_date:
        window = date_range_window(query.from_date, query.to_date)

    stage_predicates: dict[Stage, list[Any]] = {
        Stage.FILTER: filter_predicates,
        Stage.SEARCH: [config.search(search)] if search else [],
        Stage.DATE: [window.contains(config.date_column)] if window else [],
    }
    triggered = {
        Stage.SORT: sort_key is not None,
        Stage.FILTER: bool(filter_predicates),
        Stage.SEARCH: search is not None,
        Stage.DATE: window is not None,
    }

    composition = config.composition
    if settings.listing_composition == "cumulative":
        composition = Composition.CUMULATIVE

    if composition is Composition.REPLACE:
        last = None
        for stage in STAGE_ORDER:
            if triggered[stage]:
                last = stage
        criteria = stage_predicates.get(last, []) if last else []
        order_by = config.sort_options[sort_key] if last is Stage.SORT else config.default_order
    else:
        criteria = [
            predicate
            for stage in (Stage.FILTER, Stage.SEARCH, Stage.DATE)
            for predicate in stage_predicates[stage]
        ]
        order_by = config.sort_options[sort_key] if sort_key else config.default_order

    criteria = [*scope, *criteria]
    where = [and_(*criteria)] if criteria else []
    repository = Repository(db, config.model, joins=config.joins)
    total_count = repository.count(*where)
    rows = repository.find_many(
        *where,
        order_by=order_by,
        skip=(query.page - 1) * PAGE_SIZE,
        take=PAGE_SIZE,
    )

    items = [config.serialize(row) for row in rows]
    if config.enrich and items:
        config.enrich(db, rows, items, now or datetime.now())

    params = {
        "sort_by": query.sort_by,
        "filters": ", ".join(filters),
        "search": search,
        "from_date": query.from_date,
        "to_date": query.to_date,
    }
    message = _message(config, triggered, sort_key, params)

    logger.info(
        f"{config.entity} listing page {query.page}: {len(items)} of {total_count} rows"
    )
    return ListingResult(
        message=message,
        items=items,
        total_count=total_count,
        total_pages=total_pages(total_count),
    )
