from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dairyops.core.db import get_db
from dairyops.domain.pagination import ListingQuery
from dairyops.models.common import ListingResponse, MessageResponse
from dairyops.models.staff import EmployeeIn, PermissionsIn, RoleIn
from dairyops.routes.deps import listing_query
from dairyops.services.auth.security import require_super_admin
from dairyops.services.staff.employees import (
    create_employee,
    delete_employee,
    edit_employee,
    employee_details,
    list_employees_by_role,
)
from dairyops.services.staff.roles import assign_permissions, create_role, list_roles

router = APIRouter(
    prefix="/employee", tags=["Employees"], dependencies=[Depends(require_super_admin)]
)


@router.post("/roles", status_code=201)
def create_role_route(body: RoleIn, db: Session = Depends(get_db)):
    return create_role(db, body)


@router.get("/roles", response_model=ListingResponse)
def list_roles_route(
    query: ListingQuery = Depends(listing_query), db: Session = Depends(get_db)
):
    return list_roles(db, query)


@router.post("/permissions", response_model=MessageResponse)
def assign_permissions_route(body: PermissionsIn, db: Session = Depends(get_db)):
    return assign_permissions(db, body)


@router.post("", status_code=201)
def create_employee_route(body: EmployeeIn, db: Session = Depends(get_db)):
    return create_employee(db, body)


@router.get("/roles/{role_name}")
def employees_by_role_route(
    role_name: str,
    query: ListingQuery = Depends(listing_query),
    db: Session = Depends(get_db),
):
    return list_employees_by_role(db, role_name, query)


@router.get("/details/{username}")
def employee_details_route(username: str, db: Session = Depends(get_db)):
    return employee_details(db, username)


@router.put("/{employee_id}")
def edit_employee_route(
    employee_id: str, body: EmployeeIn, db: Session = Depends(get_db)
):
    return edit_employee(db, employee_id, body)


@router.delete("/{employee_id}", response_model=MessageResponse)
def delete_employee_route(employee_id: str, db: Session = Depends(get_db)):
    return delete_employee(db, employee_id)
