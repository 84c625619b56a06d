from sqlalchemy import Column, String, DateTime, Date, Float, Integer, Text, UniqueConstraint
from sqlalchemy.sql import func

from elkpeak.db.base import Base, new_id


class FriendlyTechHoaClient(Base):
    __tablename__ = "friendly_tech_hoa_clients"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="active", index=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    address = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class FriendlyTechDay(Base):
    """One on-site tech help day (a "session" in dashboard terms)."""

    __tablename__ = "friendly_tech_days"

    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, nullable=False, index=True)
    hoa_client_id = Column(String(36), nullable=True)
    revenue = Column(Float, nullable=True, default=0)
    hours = Column(Integer, nullable=True, default=0)
    sessions_count = Column(Integer, nullable=True, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class FriendlyTechMonthlyMetrics(Base):
    __tablename__ = "friendly_tech_monthly_metrics"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_friendly_tech_monthly_metrics_period"),)

    id = Column(String(36), primary_key=True, default=new_id)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    revenue = Column(Float, nullable=False, default=0)
    tech_days = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
