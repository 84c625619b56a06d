from sqlalchemy import Column, String, DateTime, Date, Float, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.sql import func

from elkpeak.db.base import Base, new_id


class ElkPeakClient(Base):
    __tablename__ = "elk_peak_clients"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="active", index=True)
    monthly_revenue = Column(Float, nullable=True, default=0)
    start_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ElkPeakProject(Base):
    __tablename__ = "elk_peak_projects"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    client_id = Column(String(36), ForeignKey("elk_peak_clients.id", ondelete="SET NULL"), nullable=True)
    revenue = Column(Float, nullable=True, default=0)
    status = Column(String(20), nullable=True, default="active", index=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ElkPeakMonthlyRevenue(Base):
    __tablename__ = "elk_peak_monthly_revenue"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_elk_peak_monthly_revenue_period"),)

    id = Column(String(36), primary_key=True, default=new_id)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    revenue = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ElkPeakMonthlyMRR(Base):
    __tablename__ = "elk_peak_monthly_mrr"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_elk_peak_monthly_mrr_period"),)

    id = Column(String(36), primary_key=True, default=new_id)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    mrr = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ElkPeakMonthlyEngagements(Base):
    __tablename__ = "elk_peak_monthly_engagements"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_elk_peak_monthly_engagements_period"),)

    id = Column(String(36), primary_key=True, default=new_id)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    count = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
