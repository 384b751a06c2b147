from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from dairyops.core.configs import settings
from dairyops.core.errors import AuthenticationError, PermissionDeniedError

SUPER_ADMIN = "super_admin"
EMPLOYEE = "employee"

pwdctx = CryptContext(
    schemes=["pbkdf2_sha256"],
    default="pbkdf2_sha256",
    deprecated="auto",
)

bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwdctx.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwdctx.verify(password, password_hash)


def encode_token(payload: dict, lifetime: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    lifetime = lifetime or timedelta(minutes=settings.access_token_expiry_minutes)
    token_payload = payload.copy()
    token_payload["iat"] = int(now.timestamp())
    token_payload["exp"] = int((now + lifetime).timestamp())
    return jwt.encode(token_payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> dict:
    """Decoded bearer token of the caller, either a super admin or an employee."""
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    principal = decode_token(credentials.credentials)
    if principal.get("user_type") not in (SUPER_ADMIN, EMPLOYEE):
        raise AuthenticationError("Invalid token")
    return principal


def require_super_admin(principal: dict = Depends(get_current_principal)) -> dict:
    if principal["user_type"] != SUPER_ADMIN:
        raise PermissionDeniedError("Only a super admin can perform this action")
    return principal
