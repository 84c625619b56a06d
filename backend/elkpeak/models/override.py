from sqlalchemy import Column, String, DateTime, Float, UniqueConstraint
from sqlalchemy.sql import func

from elkpeak.db.base import Base, new_id


class MetricOverride(Base):
    """
    Manual correction for one computed dashboard metric.

    A row for (company, metric_key) replaces the computed value; deleting the
    row reverts to the computed value.
    """

    __tablename__ = "business_metrics_overrides"
    __table_args__ = (UniqueConstraint("company", "metric_key", name="uq_business_metrics_overrides_key"),)

    id = Column(String(36), primary_key=True, default=new_id)
    company = Column(String(50), nullable=False, index=True)
    metric_key = Column(String(100), nullable=False)
    value = Column(Float, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    updated_by = Column(String(255), nullable=True)
