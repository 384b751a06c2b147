from sqlalchemy import Column, Integer, DateTime, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dairyops.core.db import Base
from dairyops.models.enums import MilkGrade
from dairyops.models.schema.types import enum_type


class MilkRecord(Base):
    __tablename__ = "milk_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cattle_id = Column(Integer, ForeignKey("cattle.id", ondelete="CASCADE"), nullable=False)
    date = Column(DateTime, nullable=False)
    morning_milk = Column(Numeric(10, 2), nullable=False, default=0)
    afternoon_milk = Column(Numeric(10, 2), nullable=False, default=0)
    evening_milk = Column(Numeric(10, 2), nullable=False, default=0)
    milk_grade = Column(enum_type(MilkGrade), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    cattle = relationship("Cattle", back_populates="milk_records")

    @property
    def cattle_name(self):
        return self.cattle.cattle_name if self.cattle else None

    @property
    def cattle_type(self):
        return self.cattle.type if self.cattle else None

    __table_args__ = (
        Index("idx_milk_records_cattle_id", "cattle_id"),
        Index("idx_milk_records_date", "date"),
    )


MILK_SESSION_FIELDS = (
    MilkRecord.morning_milk,
    MilkRecord.afternoon_milk,
    MilkRecord.evening_milk,
)
