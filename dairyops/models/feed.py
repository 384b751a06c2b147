from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dairyops.models.enums import (
    CattleType,
    FeedSession,
    FeedType,
    StockChange,
    Unit,
)


class FeedRecordIn(BaseModel):
    cattle_name: str
    type: CattleType
    feed_type: FeedType
    feed_name: Optional[str] = None
    session: FeedSession
    quantity: Decimal = Field(..., gt=0)
    unit: Unit = Unit.KG
    date: datetime


class FeedRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cattle_name: Optional[str] = None
    cattle_type: Optional[CattleType] = None
    feed_name: str
    feed_type: FeedType
    session: FeedSession
    quantity: Decimal
    unit: Unit
    date: datetime


class FeedStockIn(BaseModel):
    name: str = Field(..., min_length=1, examples=["Green Fodder"])
    unit: Unit
    quantity: Decimal = Field(..., gt=0)
    notes: Optional[str] = None
    date: datetime


class FeedStockOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    unit: Unit
    quantity: Decimal
    notes: Optional[str] = None
    date: datetime


class FeedStockHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    feed_stock_id: int
    consumption_id: Optional[int] = None
    type: StockChange
    new_quantity: Decimal
    created_at: datetime
