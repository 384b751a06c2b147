from sqlalchemy import func
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
    Stage,
    run_listing,
)
from dairyops.domain.repository import Repository
from dairyops.models.schema import Employee, Role, RoleModuleAccess
from dairyops.models.staff import ModuleAccess, PermissionsIn, RoleIn, RoleOut
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)


def registered_role_names(db: Session) -> list[str]:
    return [name for (name,) in db.query(Role.name).all()]


def _with_user_counts(db: Session, rows, items: list[dict], now) -> None:
    counts = dict(
        db.query(Employee.role_id, func.count(Employee.id))
        .filter(Employee.role_id.in_([row.id for row in rows]))
        .group_by(Employee.role_id)
        .all()
    )
    for row, item in zip(rows, items):
        item["total_users"] = counts.get(row.id, 0)


ROLE_LISTING = ListingConfig(
    entity="role",
    model=Role,
    sort_options={
        SortKey.NAME_ASC: (Role.name.asc(), Role.id.asc()),
        SortKey.NAME_DESC: (Role.name.desc(), Role.id.desc()),
        SortKey.NEWEST: (Role.created_at.desc(), Role.id.desc()),
        SortKey.OLDEST: (Role.created_at.asc(), Role.id.asc()),
    },
    default_order=(Role.created_at.desc(), Role.id.desc()),
    filter_domains=[FilterDomain("role", Role.name, registered_role_names)],
    search=lambda term: Role.name.icontains(term, autoescape=True),
    date_column=Role.created_at,
    messages=ListingMessages(
        initial="Showing all roles",
        sort="Showing roles sorted by: {sort_by}",
        filter="Showing roles filtered by selected filters",
        search="Showing roles based on search: {search}",
        date="Showing roles from {from_date} to {to_date}",
        filter_and_date="Showing roles based on filters and date range",
    ),
    composition=Composition.CUMULATIVE,
    serialize=lambda row: RoleOut.model_validate(row).model_dump(),
    enrich=_with_user_counts,
    invalid_filter_message="Please enter a registered role name",
    message_order=(Stage.SEARCH, Stage.SORT, Stage.FILTER, Stage.DATE),
)


def get_role(db: Session, role_name: str) -> Role:
    role = Repository(db, Role).find_one(Role.name == role_name)
    if role is None:
        raise NotFoundError(f'Role "{role_name}" does not exist')
    return role


@service_boundary
def create_role(db: Session, body: RoleIn) -> dict:
    repository = Repository(db, Role)
    if repository.find_one(Role.name == body.name) is not None:
        raise ConflictError(f'Role "{body.name}" already exists')
    role = repository.create(name=body.name)
    logger.info(f"Created role {role.name}")
    return {
        "message": "New role created successfully",
        "role": RoleOut.model_validate(role).model_dump(),
    }


def role_permissions(db: Session, role: Role) -> list[dict]:
    rows = Repository(db, RoleModuleAccess).find_many(
        RoleModuleAccess.role_id == role.id, order_by=(RoleModuleAccess.id.asc(),)
    )
    return [ModuleAccess.model_validate(row).model_dump() for row in rows]


@service_boundary
def assign_permissions(db: Session, body: PermissionsIn) -> dict:
    """
    Insert or update the access flags of a role, one row per module.

    The role must already be registered; module names are validated by the
    request model.
    """
    role = get_role(db, body.role_name)
    repository = Repository(db, RoleModuleAccess)
    with unit_of_work(db):
        for access in body.permissions:
            flags = {
                "can_view": access.can_view,
                "can_edit": access.can_edit,
                "can_delete": access.can_delete,
            }
            existing = repository.find_one(
                RoleModuleAccess.role_id == role.id,
                RoleModuleAccess.module_name == access.module_name.value,
            )
            if existing is not None:
                repository.update(existing, **flags)
            else:
                repository.create(role_id=role.id, module_name=access.module_name.value, **flags)

    logger.info(f"Assigned {len(body.permissions)} module permissions to role {role.name}")
    return {"message": "Access permissions assigned successfully"}


@service_boundary
def list_roles(db: Session, query: ListingQuery) -> dict:
    return run_listing(db, ROLE_LISTING, query).to_dict()
