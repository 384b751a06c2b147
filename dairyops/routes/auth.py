from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dairyops.core.db import get_db
from dairyops.models.auth import LoginIn, PasswordChangeIn, RegisterIn, TokenResponse
from dairyops.models.common import MessageResponse
from dairyops.services.auth.accounts import change_password, login, profile, register_user
from dairyops.services.auth.security import get_current_principal

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=MessageResponse, status_code=201)
def register_route(body: RegisterIn, db: Session = Depends(get_db)):
    return register_user(db, body)


@router.post("/login", response_model=TokenResponse)
def login_route(body: LoginIn, db: Session = Depends(get_db)):
    return login(db, body)


@router.get("/profile")
def profile_route(
    principal: dict = Depends(get_current_principal), db: Session = Depends(get_db)
):
    return profile(db, principal)


@router.patch("/password", response_model=MessageResponse)
def change_password_route(
    body: PasswordChangeIn,
    principal: dict = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return change_password(db, principal, body)
