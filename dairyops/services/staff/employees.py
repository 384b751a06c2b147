import re
from dataclasses import replace

from sqlalchemy import or_
from sqlalchemy.orm import Session

from dairyops.core.db import unit_of_work
from dairyops.core.errors import ConflictError, NotFoundError, service_boundary
from dairyops.domain.pagination import (
    Composition,
    FilterDomain,
    ListingConfig,
    ListingMessages,
    ListingQuery,
    SortKey,
    run_listing,
)
from dairyops.domain.repository import Repository
from dairyops.models.enums import EmployeeStatus
from dairyops.models.schema import Employee
from dairyops.models.staff import EmployeeCredentials, EmployeeIn, EmployeeOut
from dairyops.services.auth.security import hash_password
from dairyops.services.staff.roles import get_role, role_permissions
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)

EMPLOYEE_ID_PREFIX = "EMP"
DEFAULT_PASSWORD_SUFFIX = "@1234"


EMPLOYEE_LISTING = ListingConfig(
    entity="employee",
    model=Employee,
    sort_options={
        SortKey.NAME_ASC: (Employee.name.asc(), Employee.id.asc()),
        SortKey.NAME_DESC: (Employee.name.desc(), Employee.id.desc()),
        SortKey.NEWEST: (Employee.created_at.desc(), Employee.id.desc()),
        SortKey.OLDEST: (Employee.created_at.asc(), Employee.id.asc()),
    },
    default_order=(Employee.id.asc(),),
    filter_domains=[
        FilterDomain(
            "status",
            Employee.active,
            [status.value for status in EmployeeStatus],
            convert=lambda token: token == EmployeeStatus.ACTIVE.value,
        )
    ],
    search=lambda term: or_(
        Employee.name.icontains(term, autoescape=True),
        Employee.username.icontains(term, autoescape=True),
        Employee.mobile.icontains(term, autoescape=True),
    ),
    date_column=Employee.created_at,
    messages=ListingMessages(
        initial="Showing all employees",
        sort="Showing the employees sorted by {sort_by}",
        filter="Showing the employees filtered by {filters}",
        search="Showing the employees based on {search}",
        date="Showing the employees joined from {from_date} to {to_date}",
    ),
    composition=Composition.CUMULATIVE,
    serialize=lambda row: EmployeeOut.model_validate(row).model_dump(),
    invalid_filter_message="Please enter a valid employee status",
)


def _compact(name: str) -> str:
    return re.sub(r"\s+", "", name.strip())


def generate_username(name: str, sequence: str) -> str:
    return _compact(name).lower() + sequence


def generate_password(name: str) -> str:
    """Capitalized name without spaces plus the default suffix: "John Doe" -> "Johndoe@1234"."""
    compact = _compact(name)
    return compact[:1].upper() + compact[1:].lower() + DEFAULT_PASSWORD_SUFFIX


def _next_sequence(db: Session) -> int:
    highest = 0
    for (employee_id,) in db.query(Employee.id).all():
        match = re.fullmatch(rf"{EMPLOYEE_ID_PREFIX}(\d+)", employee_id)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def _get_employee(db: Session, employee_id: str) -> Employee:
    employee = Repository(db, Employee).find_one(Employee.id == employee_id)
    if employee is None:
        raise NotFoundError("Employee not found!")
    return employee


def _check_email_free(db: Session, email, employee_id=None) -> None:
    if not email:
        return
    criteria = [Employee.email == email]
    if employee_id is not None:
        criteria.append(Employee.id != employee_id)
    if Repository(db, Employee).find_one(*criteria) is not None:
        raise ConflictError("Email is already in use")


@service_boundary
def create_employee(db: Session, body: EmployeeIn) -> dict:
    """
    Register an employee under an existing role.

    The id is EMP followed by a zero-padded sequence, the username is the
    name without spaces in lower case plus the same sequence. The generated
    password is stored hashed and returned once in the response.
    """
    role = get_role(db, body.role_name)
    _check_email_free(db, body.email)

    sequence = f"{_next_sequence(db):03d}"
    credentials = EmployeeCredentials(
        username=generate_username(body.name, sequence),
        password=generate_password(body.name),
    )
    with unit_of_work(db):
        employee = Repository(db, Employee).create(
            id=EMPLOYEE_ID_PREFIX + sequence,
            name=body.name,
            username=credentials.username,
            password_hash=hash_password(credentials.password),
            email=body.email,
            mobile=body.mobile,
            address=body.address,
            role_id=role.id,
            active=body.active,
        )

    logger.info(f"Created employee {employee.id} ({employee.username}) as {role.name}")
    return {
        "message": "New employee created successfully",
        "employee": EmployeeOut.model_validate(employee).model_dump(),
        "credentials": credentials.model_dump(),
    }


@service_boundary
def edit_employee(db: Session, employee_id: str, body: EmployeeIn) -> dict:
    """Update an employee; the username keeps its numeric suffix and the password is regenerated."""
    employee = _get_employee(db, employee_id)
    role = get_role(db, body.role_name)
    _check_email_free(db, body.email, employee_id)

    suffix = re.search(r"\d+$", employee.username)
    credentials = EmployeeCredentials(
        username=generate_username(body.name, suffix.group(0) if suffix else ""),
        password=generate_password(body.name),
    )
    clash = Repository(db, Employee).find_one(
        Employee.username == credentials.username, Employee.id != employee_id
    )
    if clash is not None:
        raise ConflictError("Username is already in use")

    with unit_of_work(db):
        Repository(db, Employee).update(
            employee,
            name=body.name,
            username=credentials.username,
            password_hash=hash_password(credentials.password),
            email=body.email,
            mobile=body.mobile,
            address=body.address,
            role=role,
            active=body.active,
        )

    logger.info(f"Updated employee {employee_id}")
    return {
        "message": "Employee details updated successfully",
        "employee": EmployeeOut.model_validate(employee).model_dump(),
        "credentials": credentials.model_dump(),
    }


@service_boundary
def delete_employee(db: Session, employee_id: str) -> dict:
    employee = _get_employee(db, employee_id)
    Repository(db, Employee).delete(employee)
    logger.info(f"Deleted employee {employee_id}")
    return {"message": "Employee deleted successfully!"}


@service_boundary
def list_employees_by_role(db: Session, role_name: str, query: ListingQuery) -> dict:
    role = get_role(db, role_name)
    escaped = role.name.replace("{", "{{").replace("}", "}}")
    config = replace(
        EMPLOYEE_LISTING,
        messages=replace(
            EMPLOYEE_LISTING.messages, initial=f"Showing all details for the role {escaped}"
        ),
    )
    result = run_listing(db, config, query, scope=[Employee.role_id == role.id]).to_dict()
    result["role"] = role.name
    result["permissions"] = role_permissions(db, role)
    return result


@service_boundary
def employee_details(db: Session, username: str) -> dict:
    employee = Repository(db, Employee).find_one(Employee.username == username)
    if employee is None:
        raise NotFoundError("Employee not found!")
    return {
        "message": "Showing the fetched employee details",
        "employee": EmployeeOut.model_validate(employee).model_dump(),
        "permissions": role_permissions(db, employee.role),
    }
