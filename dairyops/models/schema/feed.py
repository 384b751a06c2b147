from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Numeric,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dairyops.core.db import Base
from dairyops.models.enums import FeedSession, FeedType, Unit, StockChange
from dairyops.models.schema.types import enum_type


class FeedConsumption(Base):
    __tablename__ = "feed_consumptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cattle_id = Column(Integer, ForeignKey("cattle.id", ondelete="CASCADE"), nullable=False)
    feed_name = Column(String, nullable=False)
    feed_type = Column(enum_type(FeedType), nullable=False)
    session = Column(enum_type(FeedSession), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)
    unit = Column(enum_type(Unit), nullable=False)
    date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    cattle = relationship("Cattle", back_populates="feed_consumptions")

    @property
    def cattle_name(self):
        return self.cattle.cattle_name if self.cattle else None

    @property
    def cattle_type(self):
        return self.cattle.type if self.cattle else None

    # The stock ledger row written when this consumption drew from stock
    stock_entry = relationship(
        "FeedStockHistory", back_populates="consumption", uselist=False
    )

    __table_args__ = (
        Index("idx_feed_consumptions_cattle_id", "cattle_id"),
        Index("idx_feed_consumptions_date", "date"),
    )


class FeedStock(Base):
    __tablename__ = "feed_stocks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    unit = Column(enum_type(Unit), nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(String, nullable=True)
    date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    history = relationship(
        "FeedStockHistory", back_populates="feed_stock", cascade="all, delete-orphan"
    )

    __table_args__ = (UniqueConstraint("name", "unit", name="uq_feed_stocks_name_unit"),)


class FeedStockHistory(Base):
    __tablename__ = "feed_stock_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    feed_stock_id = Column(Integer, ForeignKey("feed_stocks.id"), nullable=False)
    consumption_id = Column(
        Integer,
        ForeignKey("feed_consumptions.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    type = Column(enum_type(StockChange), nullable=False)
    new_quantity = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, server_default=func.now(), nullable=False, onupdate=func.now()
    )

    feed_stock = relationship("FeedStock", back_populates="history")
    consumption = relationship("FeedConsumption", back_populates="stock_entry")

    __table_args__ = (Index("idx_feed_stock_history_stock_id", "feed_stock_id"),)
