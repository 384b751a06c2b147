from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a driver value (None, float, int, Decimal) into a Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class Repository:
    """
    Thin persistence gateway for one mapped model.

    `joins` are relationship attributes joined into every query so criteria
    and ordering may reference the related table (e.g. the cattle name of a
    milk record).
    """

    def __init__(self, db: Session, model, joins: Sequence[Any] = ()):
        self.db = db
        self.model = model
        self.joins = tuple(joins)

    def _query(self, *entities):
        query = self.db.query(*(entities or (self.model,)))
        if entities:
            query = query.select_from(self.model)
        for join in self.joins:
            query = query.join(join)
        return query

    def find_one(self, *criteria, order_by: Iterable[Any] = ()):
        return self._query().filter(*criteria).order_by(*order_by).first()

    def find_many(
        self,
        *criteria,
        order_by: Iterable[Any] = (),
        skip: Optional[int] = None,
        take: Optional[int] = None,
    ) -> list:
        query = self._query().filter(*criteria).order_by(*order_by)
        if skip:
            query = query.offset(skip)
        if take is not None:
            query = query.limit(take)
        return query.all()

    def count(self, *criteria) -> int:
        return self._query(func.count(self.model.id)).filter(*criteria).scalar() or 0

    def aggregate_sum(self, fields: Sequence[Any], *criteria) -> dict[str, Decimal]:
        row = self._query(*[func.sum(field) for field in fields]).filter(*criteria).one()
        return {field.key: to_decimal(value) for field, value in zip(fields, row)}

    def aggregate_average(
        self, fields: Sequence[Any], *criteria
    ) -> dict[str, Optional[Decimal]]:
        row = self._query(*[func.avg(field) for field in fields]).filter(*criteria).one()
        return {
            field.key: (None if value is None else to_decimal(value))
            for field, value in zip(fields, row)
        }

    def create(self, **data):
        instance = self.model(**data)
        self.db.add(instance)
        self.db.flush()
        return instance

    def update(self, instance, **data):
        for key, value in data.items():
            setattr(instance, key, value)
        self.db.flush()
        return instance

    def delete(self, instance) -> None:
        self.db.delete(instance)
        self.db.flush()
