from sqlalchemy import Column, String, DateTime, Date, Float, Integer, Text, UniqueConstraint
from sqlalchemy.sql import func

from elkpeak.db.base import Base, new_id


class LifeOrganizerKdpSale(Base):
    __tablename__ = "life_organizer_kdp_sales"

    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, nullable=False, index=True)
    units = Column(Integer, nullable=True, default=0)
    revenue = Column(Float, nullable=True, default=0)
    product_name = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class LifeOrganizerNotionSale(Base):
    __tablename__ = "life_organizer_notion_sales"

    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, nullable=False, index=True)
    units = Column(Integer, nullable=True, default=0)
    revenue = Column(Float, nullable=True, default=0)
    product_name = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class LifeOrganizerMonthlyRevenue(Base):
    """Monthly revenue per sales channel; the source of truth for revenue totals."""

    __tablename__ = "life_organizer_monthly_revenue"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_life_organizer_monthly_revenue_period"),)

    id = Column(String(36), primary_key=True, default=new_id)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    kdp_revenue = Column(Float, nullable=False, default=0)
    notion_revenue = Column(Float, nullable=False, default=0)
    etsy_revenue = Column(Float, nullable=False, default=0)
    gumroad_revenue = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
