from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dairyops.core.db import Base


class Checkup(Base):
    __tablename__ = "checkups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cattle_id = Column(Integer, ForeignKey("cattle.id", ondelete="CASCADE"), nullable=False)
    date = Column(DateTime, nullable=False)
    prescription = Column(String, nullable=False)
    description = Column(String, nullable=False)
    doctor_name = Column(String, nullable=False)
    doctor_phone = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    cattle = relationship("Cattle", back_populates="checkups")

    @property
    def cattle_name(self):
        return self.cattle.cattle_name if self.cattle else None

    @property
    def cattle_type(self):
        return self.cattle.type if self.cattle else None

    __table_args__ = (Index("idx_checkups_date", "date"),)


class Vaccination(Base):
    __tablename__ = "vaccinations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cattle_id = Column(Integer, ForeignKey("cattle.id", ondelete="CASCADE"), nullable=False)
    date = Column(DateTime, nullable=False)
    name = Column(String, nullable=False)
    notes = Column(String, nullable=False)
    doctor_name = Column(String, nullable=False)
    doctor_phone = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    cattle = relationship("Cattle", back_populates="vaccinations")

    @property
    def cattle_name(self):
        return self.cattle.cattle_name if self.cattle else None

    @property
    def cattle_type(self):
        return self.cattle.type if self.cattle else None

    __table_args__ = (Index("idx_vaccinations_date", "date"),)
