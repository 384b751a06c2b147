from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Numeric,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dairyops.core.db import Base
from dairyops.models.enums import (
    CattleType,
    CattleBreed,
    HealthStatus,
    InseminationType,
    ParentOrigin,
    Gender,
)
from dairyops.models.schema.types import enum_type


class Cattle(Base):
    __tablename__ = "cattle"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cattle_name = Column(String, nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    type = Column(enum_type(CattleType), nullable=False)
    breed = Column(enum_type(CattleBreed), nullable=False)
    health_status = Column(enum_type(HealthStatus), nullable=False)
    weight = Column(Numeric(10, 2), nullable=False)
    snf = Column(Numeric(5, 2), nullable=True)
    father_insemination = Column(enum_type(InseminationType), nullable=True)
    parent = Column(enum_type(ParentOrigin), nullable=True)
    birth_date = Column(DateTime, nullable=False)
    farm_entry_date = Column(DateTime, nullable=False)
    purchase_amount = Column(Numeric(12, 2), nullable=True)
    vendor_name = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    image1 = Column(String, nullable=True)
    image2 = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    # Relationships
    owner = relationship("User", back_populates="cattle")
    calves = relationship(
        "Calf", back_populates="cattle", cascade="all, delete-orphan"
    )
    milk_records = relationship(
        "MilkRecord", back_populates="cattle", cascade="all, delete-orphan"
    )
    feed_consumptions = relationship(
        "FeedConsumption", back_populates="cattle", cascade="all, delete-orphan"
    )
    checkups = relationship(
        "Checkup", back_populates="cattle", cascade="all, delete-orphan"
    )
    vaccinations = relationship(
        "Vaccination", back_populates="cattle", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_cattle_type", "type"),
        Index("idx_cattle_farm_entry_date", "farm_entry_date"),
    )


class Calf(Base):
    __tablename__ = "calves"

    id = Column(Integer, primary_key=True, autoincrement=True)
    calf_id = Column(String, nullable=False, unique=True)
    cattle_id = Column(Integer, ForeignKey("cattle.id", ondelete="CASCADE"), nullable=False)
    birth_date = Column(DateTime, nullable=False)
    gender = Column(enum_type(Gender), nullable=False)
    health_status = Column(enum_type(HealthStatus), nullable=False)
    weight = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    cattle = relationship("Cattle", back_populates="calves")

    @property
    def cattle_name(self):
        return self.cattle.cattle_name if self.cattle else None

    @property
    def cattle_type(self):
        return self.cattle.type if self.cattle else None

    __table_args__ = (Index("idx_calves_cattle_id", "cattle_id"),)
