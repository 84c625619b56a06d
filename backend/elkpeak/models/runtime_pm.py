from sqlalchemy import Column, String, DateTime, Date, Float, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.sql import func

from elkpeak.db.base import Base, new_id


class RuntimePMUser(Base):
    __tablename__ = "runtime_pm_users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="active", index=True)
    signup_date = Column(Date, nullable=False)
    last_active_date = Column(Date, nullable=True)
    subscription_tier = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class RuntimePMSubscription(Base):
    __tablename__ = "runtime_pm_subscriptions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("runtime_pm_users.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    monthly_amount = Column(Float, nullable=True, default=0)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class RuntimePMMonthlyMetrics(Base):
    __tablename__ = "runtime_pm_monthly_metrics"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_runtime_pm_monthly_metrics_period"),)

    id = Column(String(36), primary_key=True, default=new_id)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    active_users = Column(Integer, nullable=False, default=0)
    revenue = Column(Float, nullable=False, default=0)
    active_subscriptions = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
