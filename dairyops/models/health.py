from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dairyops.models.enums import CattleType


class CheckupIn(BaseModel):
    cattle_name: str
    type: CattleType
    date: datetime
    prescription: str = Field(..., min_length=5)
    description: str = Field(..., min_length=5)
    doctor_name: str
    doctor_phone: str


class CheckupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cattle_name: Optional[str] = None
    cattle_type: Optional[CattleType] = None
    date: datetime
    prescription: str
    description: str
    doctor_name: str
    doctor_phone: str


class VaccinationIn(BaseModel):
    cattle_name: str
    type: CattleType
    date: datetime
    name: str = Field(..., min_length=5, examples=["Brucellosis"])
    notes: str = Field(..., min_length=5)
    doctor_name: str
    doctor_phone: str


class VaccinationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cattle_name: Optional[str] = None
    cattle_type: Optional[CattleType] = None
    date: datetime
    name: str
    notes: str
    doctor_name: str
    doctor_phone: str


class CheckupEditIn(BaseModel):
    date: datetime
    prescription: str = Field(..., min_length=5)
    description: str = Field(..., min_length=5)


class VaccinationEditIn(BaseModel):
    date: datetime
    name: str = Field(..., min_length=5)
    notes: str = Field(..., min_length=5)
