from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dairyops.models.enums import (
    CattleType,
    CattleBreed,
    HealthStatus,
    InseminationType,
    ParentOrigin,
    Gender,
)

CATTLE_NAME_PATTERN = r"^[A-Za-z]+-\d+$"


class CattleIn(BaseModel):
    cattle_name: str = Field(..., pattern=CATTLE_NAME_PATTERN, examples=["Kaveri-001"])
    type: CattleType
    breed: CattleBreed
    health_status: HealthStatus
    weight: Decimal = Field(..., gt=0)
    snf: Optional[Decimal] = None
    father_insemination: Optional[InseminationType] = None
    parent: Optional[ParentOrigin] = None
    birth_date: date
    farm_entry_date: date
    purchase_amount: Optional[Decimal] = None
    vendor_name: Optional[str] = None
    active: bool = True
    image1: Optional[str] = None
    image2: Optional[str] = None


class CattleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cattle_name: str
    type: CattleType
    breed: CattleBreed
    health_status: HealthStatus
    weight: Decimal
    snf: Optional[Decimal] = None
    father_insemination: Optional[InseminationType] = None
    parent: Optional[ParentOrigin] = None
    birth_date: datetime
    farm_entry_date: datetime
    purchase_amount: Optional[Decimal] = None
    vendor_name: Optional[str] = None
    active: bool
    image1: Optional[str] = None
    image2: Optional[str] = None


class CalfIn(BaseModel):
    cattle_name: str = Field(..., pattern=CATTLE_NAME_PATTERN)
    calf_id: str = Field(..., pattern=r"^[a-z]-\d+$", examples=["c-202"])
    birth_date: date
    gender: Gender
    health_status: HealthStatus
    weight: Decimal = Field(..., gt=0)


class CalfOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    calf_id: str
    cattle_name: Optional[str] = None
    birth_date: datetime
    gender: Gender
    health_status: HealthStatus
    weight: Decimal
