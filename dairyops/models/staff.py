from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from dairyops.models.enums import FarmModule


class RoleIn(BaseModel):
    name: str = Field(..., min_length=2, examples=["Manager"])


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: Optional[datetime] = None


class ModuleAccess(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    module_name: FarmModule
    can_view: bool
    can_edit: bool
    can_delete: bool


class PermissionsIn(BaseModel):
    role_name: str
    permissions: list[ModuleAccess]


class EmployeeIn(BaseModel):
    name: str = Field(..., min_length=1, examples=["John Doe"])
    mobile: str = Field(..., pattern=r"^[6-9]\d{9}$", examples=["9876543210"])
    email: Optional[EmailStr] = None
    role_name: str
    active: bool = True
    address: str


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    username: str
    email: Optional[str] = None
    mobile: str
    address: str
    role_name: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None


class EmployeeCredentials(BaseModel):
    username: str
    password: str
