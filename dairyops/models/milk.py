from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dairyops.models.enums import CattleType, MilkGrade


class MilkRecordIn(BaseModel):
    cattle_name: str
    date: datetime
    morning_milk: Decimal = Field(default=Decimal("0"), ge=0)
    afternoon_milk: Decimal = Field(default=Decimal("0"), ge=0)
    evening_milk: Decimal = Field(default=Decimal("0"), ge=0)
    milk_grade: MilkGrade


class MilkRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cattle_name: Optional[str] = None
    cattle_type: Optional[CattleType] = None
    date: datetime
    morning_milk: Decimal
    afternoon_milk: Decimal
    evening_milk: Decimal
    milk_grade: MilkGrade


class MonthlyProduction(BaseModel):
    month: str
    cow_milk: Decimal
    goat_milk: Decimal
    buffalo_milk: Decimal
    total_milk: Decimal


class MonthlyProductionResponse(BaseModel):
    message: str
    data: list[MonthlyProduction]
