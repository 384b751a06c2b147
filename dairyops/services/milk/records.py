import calendar
from collections import Counter
from datetime import datetime
from typing import Optional

import pandas as pd
from sqlalchemy import or_
from sqlalchemy.orm import Session

from dairyops.core.errors import InvalidArgumentError, NotFoundError, service_boundary
from dairyops.domain.pagination import (
    Composition,
    ListingConfig,
    ListingMessages,
    ListingQuery,
    SortKey,
    enum_domain,
    run_listing,
)
from dairyops.domain.repository import Repository, to_decimal
from dairyops.domain.windows import Window, date_range_window, end_of_day, start_of_day
from dairyops.models.enums import CattleType, MilkGrade, MilkReportSession
from dairyops.models.milk import MilkRecordIn, MilkRecordOut
from dairyops.models.schema import Cattle, MilkRecord
from dairyops.services.cattle.animals import get_cattle_by_name
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)

GRADE_VALUES = {grade.value for grade in MilkGrade}


def _milk_search(term: str):
    predicates = [Cattle.cattle_name.icontains(term, autoescape=True)]
    if term in GRADE_VALUES:
        predicates.append(MilkRecord.milk_grade == MilkGrade(term))
    return or_(*predicates)


MILK_LISTING = ListingConfig(
    entity="milk",
    model=MilkRecord,
    sort_options={
        SortKey.NAME_ASC: (Cattle.cattle_name.asc(), MilkRecord.id.asc()),
        SortKey.NAME_DESC: (Cattle.cattle_name.desc(), MilkRecord.id.desc()),
        SortKey.NEWEST: (MilkRecord.date.desc(), MilkRecord.id.desc()),
        SortKey.OLDEST: (MilkRecord.date.asc(), MilkRecord.id.asc()),
    },
    default_order=(MilkRecord.date.desc(), MilkRecord.id.desc()),
    filter_domains=[
        enum_domain("cattle_type", Cattle.type, CattleType),
        enum_domain("milk_grade", MilkRecord.milk_grade, MilkGrade),
    ],
    search=_milk_search,
    date_column=MilkRecord.date,
    messages=ListingMessages(
        initial="showing initial milk data",
        sort="showing the sorted data",
        filter="showing the filtered data",
        search="Showing the filtered data for {search}",
        date="Showing the milk records from {from_date} to {to_date}",
    ),
    composition=Composition.REPLACE,
    serialize=lambda row: MilkRecordOut.model_validate(row).model_dump(),
    joins=(MilkRecord.cattle,),
    invalid_sort_message="Please enter a valid query value",
    invalid_filter_message="please enter a valid cattle type or milk grade",
)


def _records_of(db: Session, cattle: Cattle, window: Optional[Window] = None) -> list[dict]:
    criteria = [MilkRecord.cattle_id == cattle.id]
    if window is not None:
        criteria.append(window.contains(MilkRecord.date))
    rows = Repository(db, MilkRecord).find_many(
        *criteria, order_by=(MilkRecord.date.desc(), MilkRecord.id.desc())
    )
    return [MilkRecordOut.model_validate(row).model_dump() for row in rows]


def _get_record(db: Session, record_id: int) -> MilkRecord:
    record = Repository(db, MilkRecord).find_one(MilkRecord.id == record_id)
    if record is None:
        raise NotFoundError("No milk record found with the given id")
    return record


@service_boundary
def add_milk_record(db: Session, body: MilkRecordIn) -> dict:
    cattle = get_cattle_by_name(db, body.cattle_name, "No cattle found with the given name")
    record = Repository(db, MilkRecord).create(
        cattle_id=cattle.id,
        date=body.date,
        morning_milk=body.morning_milk,
        afternoon_milk=body.afternoon_milk,
        evening_milk=body.evening_milk,
        milk_grade=body.milk_grade,
    )
    logger.info(f"Added milk record {record.id} for {cattle.cattle_name}")
    return {"message": "New milk record added successfully!", "id": record.id}


@service_boundary
def list_milk_records(db: Session, query: ListingQuery) -> dict:
    return run_listing(db, MILK_LISTING, query).to_dict()


@service_boundary
def cattle_milk_records(db: Session, cattle_name: str) -> dict:
    cattle = get_cattle_by_name(db, cattle_name, "No cattle found with the given name")
    records = _records_of(db, cattle)
    # most_common keeps first-seen order on ties, i.e. the most recent record wins
    grades = Counter(record["milk_grade"] for record in records).most_common(1)
    return {
        "message": f"Showing all milk records of {cattle_name}",
        "milk_grade": grades[0][0] if grades else None,
        "records": records,
    }


@service_boundary
def update_milk_record(db: Session, record_id: int, body: MilkRecordIn) -> dict:
    record = _get_record(db, record_id)
    cattle = get_cattle_by_name(db, body.cattle_name, "No cattle found with the given name")
    Repository(db, MilkRecord).update(
        record,
        cattle_id=cattle.id,
        date=body.date,
        morning_milk=body.morning_milk,
        afternoon_milk=body.afternoon_milk,
        evening_milk=body.evening_milk,
        milk_grade=body.milk_grade,
    )
    logger.info(f"Updated milk record {record_id}")
    return {
        "message": "Milk record details updated successfully!",
        "records": _records_of(db, cattle),
    }


@service_boundary
def delete_milk_record(db: Session, record_id: int) -> dict:
    record = _get_record(db, record_id)
    cattle = record.cattle
    Repository(db, MilkRecord).delete(record)
    logger.info(f"Deleted milk record {record_id}")
    return {
        "message": "Milk record deleted successfully",
        "records": _records_of(db, cattle),
    }


@service_boundary
def milk_records_for_range(
    db: Session, cattle_name: str, from_date: str, to_date: str
) -> dict:
    window = date_range_window(from_date, to_date)
    cattle = get_cattle_by_name(db, cattle_name, "No cattle found with the given name")
    return {
        "message": f"Showing all milk records for {from_date} to {to_date}",
        "records": _records_of(db, cattle, window),
    }


SESSION_COLUMNS = {
    MilkReportSession.MORNING: ["morning"],
    MilkReportSession.AFTERNOON: ["afternoon"],
    MilkReportSession.EVENING: ["evening"],
    MilkReportSession.OVERALL: ["morning", "afternoon", "evening"],
}


@service_boundary
def monthly_production_report(db: Session, now: datetime, session: str) -> dict:
    """
    Milk produced per calendar month of the current year, split by cattle type.

    Args:
        session: Morning, Afternoon, Evening or Overall (all three sessions)

    Returns:
        dict: message and twelve monthly rows with cow, goat, buffalo and total milk
    """
    try:
        report_session = MilkReportSession(session)
    except ValueError:
        raise InvalidArgumentError("Please enter a valid query value")

    year = Window(
        start_of_day(now.replace(month=1, day=1)),
        end_of_day(now.replace(month=12, day=31)),
    )
    rows = (
        db.query(
            MilkRecord.date,
            Cattle.type,
            MilkRecord.morning_milk,
            MilkRecord.afternoon_milk,
            MilkRecord.evening_milk,
        )
        .join(MilkRecord.cattle)
        .filter(year.contains(MilkRecord.date))
        .all()
    )

    frame = pd.DataFrame(
        [
            (record_date.month, cattle_type.value, float(morning), float(afternoon), float(evening))
            for record_date, cattle_type, morning, afternoon, evening in rows
        ],
        columns=["month", "type", "morning", "afternoon", "evening"],
    )
    type_columns = [t.value for t in CattleType]
    if frame.empty:
        totals = pd.DataFrame(0.0, index=range(1, 13), columns=type_columns)
    else:
        frame["value"] = frame[SESSION_COLUMNS[report_session]].sum(axis=1)
        totals = (
            frame.pivot_table(index="month", columns="type", values="value", aggfunc="sum")
            .reindex(index=range(1, 13), columns=type_columns)
            .fillna(0.0)
        )

    data = []
    for month, row in totals.iterrows():
        cow, buffalo, goat = (to_decimal(round(row[t.value], 2)) for t in CattleType)
        data.append(
            {
                "month": calendar.month_name[int(month)],
                "cow_milk": cow,
                "goat_milk": goat,
                "buffalo_milk": buffalo,
                "total_milk": cow + goat + buffalo,
            }
        )

    return {"message": f"Monthly Milk Report ({report_session.value.upper()})", "data": data}
