from sqlalchemy import Column, String, DateTime, Float, Integer, Text, UniqueConstraint
from sqlalchemy.sql import func

from elkpeak.db.base import Base, new_id


class OrganizationMonthlyCost(Base):
    """Shared operating costs across all four businesses, one row per month."""

    __tablename__ = "organization_monthly_costs"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_organization_monthly_costs_period"),)

    id = Column(String(36), primary_key=True, default=new_id)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    cost = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
