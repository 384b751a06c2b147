from sqlalchemy import or_
from sqlalchemy.orm import Session

from dairyops.core.errors import AuthenticationError, ConflictError, service_boundary
from dairyops.domain.repository import Repository
from dairyops.models.auth import LoginIn, PasswordChangeIn, RegisterIn
from dairyops.models.schema import Employee, User
from dairyops.models.staff import EmployeeOut
from dairyops.services.auth.security import (
    EMPLOYEE,
    SUPER_ADMIN,
    encode_token,
    hash_password,
    verify_password,
)
from dairyops.services.staff.roles import role_permissions
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _user_profile(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email, "role": "SuperAdmin"}


@service_boundary
def register_user(db: Session, body: RegisterIn) -> dict:
    users = Repository(db, User)
    if users.find_one(User.email == body.email) is not None:
        raise ConflictError("Email is already in use")
    user = users.create(
        name=body.name, email=body.email, password_hash=hash_password(body.password)
    )
    logger.info(f"Registered super admin {user.id}")
    return {"message": "New user registered successfully!"}


@service_boundary
def login(db: Session, body: LoginIn) -> dict:
    """
    Sign in a super admin (by email) or an employee (by email or username).

    Both kinds get a bearer token; employees also get their role's module
    permissions.
    """
    user = Repository(db, User).find_one(User.email == body.identifier)
    if user is not None:
        if not verify_password(body.password, user.password_hash):
            raise AuthenticationError(INVALID_CREDENTIALS)
        token = encode_token({"sub": str(user.id), "email": user.email, "user_type": SUPER_ADMIN})
        logger.info(f"Super admin {user.id} logged in")
        return {
            "message": "Super Admin login successfull",
            "access_token": token,
            "token_type": "bearer",
            "profile": _user_profile(user),
            "permissions": [],
        }

    employee = Repository(db, Employee).find_one(
        or_(Employee.email == body.identifier, Employee.username == body.identifier)
    )
    if employee is None or not verify_password(body.password, employee.password_hash):
        logger.warning(f"Failed login for {body.identifier}")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not employee.active:
        raise AuthenticationError("Employee account is inactive")

    token = encode_token(
        {
            "sub": employee.id,
            "username": employee.username,
            "role": employee.role_name,
            "user_type": EMPLOYEE,
        }
    )
    logger.info(f"Employee {employee.id} logged in")
    return {
        "message": "Employee login successfull",
        "access_token": token,
        "token_type": "bearer",
        "profile": EmployeeOut.model_validate(employee).model_dump(),
        "permissions": role_permissions(db, employee.role),
    }


def _principal_account(db: Session, principal: dict):
    if principal["user_type"] == SUPER_ADMIN:
        account = Repository(db, User).find_one(User.id == int(principal["sub"]))
    else:
        account = Repository(db, Employee).find_one(Employee.id == principal["sub"])
    if account is None:
        raise AuthenticationError("Account no longer exists")
    return account


@service_boundary
def profile(db: Session, principal: dict) -> dict:
    account = _principal_account(db, principal)
    if principal["user_type"] == SUPER_ADMIN:
        return {
            "message": "SuperAdmin details fetched successfully!",
            "profile": _user_profile(account),
        }
    return {
        "message": "Showing the fetched employee details",
        "profile": EmployeeOut.model_validate(account).model_dump(),
        "permissions": role_permissions(db, account.role),
    }


@service_boundary
def change_password(db: Session, principal: dict, body: PasswordChangeIn) -> dict:
    account = _principal_account(db, principal)
    if not verify_password(body.current_password, account.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS)
    if body.new_password == body.current_password:
        raise ConflictError("Please choose a password different from your current one")
    Repository(db, type(account)).update(account, password_hash=hash_password(body.new_password))
    logger.info(f"Password changed for {principal['user_type']} {principal['sub']}")
    return {"message": "Password updated successfully!"}
