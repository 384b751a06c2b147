from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterIn(BaseModel):
    name: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginIn(BaseModel):
    identifier: str = Field(..., description="Email, or an employee username")
    password: str


class TokenResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    profile: dict
    permissions: list[dict] = []


class PasswordChangeIn(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)
