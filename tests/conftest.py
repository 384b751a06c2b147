"""
Shared fixtures: an in-memory SQLite database per test, a frozen clock and
an API client wired to both.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import dairyops.models.schema  # noqa: F401  registers every table on Base
from dairyops.core.clock import get_clock
from dairyops.core.db import Base, get_db
from dairyops.main import app
from dairyops.models.auth import RegisterIn
from dairyops.models.cattle import CattleIn
from dairyops.models.enums import (
    CattleBreed,
    CattleType,
    HealthStatus,
    MilkGrade,
    Unit,
)
from dairyops.models.feed import FeedStockIn
from dairyops.models.milk import MilkRecordIn
from dairyops.models.schema import User
from dairyops.services.auth.accounts import register_user
from dairyops.services.auth.security import SUPER_ADMIN, encode_token
from dairyops.services.cattle.animals import add_cattle
from dairyops.services.feed.stock import add_stock
from dairyops.services.milk.records import add_milk_record

NOW = datetime(2025, 6, 15, 10, 30)


@pytest.fixture
def db():
    """A fresh schema in a private in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def client(db):
    """API client sharing the test session and the frozen clock."""

    def override_get_db():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    """A registered super admin."""
    register_user(db, RegisterIn(name="Owner", email="owner@dairyfarm.in", password="secret123"))
    db.commit()
    return db.query(User).filter(User.email == "owner@dairyfarm.in").one()


@pytest.fixture
def admin_headers(admin):
    token = encode_token({"sub": str(admin.id), "email": admin.email, "user_type": SUPER_ADMIN})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_cattle(db):
    """Factory adding one animal through the service layer."""

    def make(
        name: str,
        cattle_type: CattleType = CattleType.COW,
        breed: CattleBreed = CattleBreed.GIR,
        health: HealthStatus = HealthStatus.HEALTHY,
        entered: date = date(2025, 6, 1),
        active: bool = True,
    ):
        body = CattleIn(
            cattle_name=name,
            type=cattle_type,
            breed=breed,
            health_status=health,
            weight=Decimal("350"),
            birth_date=date(2021, 3, 10),
            farm_entry_date=entered,
            active=active,
        )
        return add_cattle(db, body)["cattle"]

    return make


@pytest.fixture
def make_milk(db):
    """Factory adding one milk record."""

    def make(
        cattle_name: str,
        when: datetime,
        morning: str = "0",
        afternoon: str = "0",
        evening: str = "0",
        grade: MilkGrade = MilkGrade.A2,
    ) -> int:
        body = MilkRecordIn(
            cattle_name=cattle_name,
            date=when,
            morning_milk=Decimal(morning),
            afternoon_milk=Decimal(afternoon),
            evening_milk=Decimal(evening),
            milk_grade=grade,
        )
        return add_milk_record(db, body)["id"]

    return make


@pytest.fixture
def make_stock(db):
    """Factory restocking a feed line."""

    def make(name: str, quantity: str, unit: Unit = Unit.KG, when: datetime = NOW):
        body = FeedStockIn(name=name, unit=unit, quantity=Decimal(quantity), date=when)
        return add_stock(db, body)["stock"]

    return make
