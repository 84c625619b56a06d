from sqlalchemy import Column, String, DateTime, Float, Integer, CheckConstraint, Index
from sqlalchemy.sql import func
import enum

from elkpeak.db.base import Base, new_id


class GoalMetricType(str, enum.Enum):
    elk_peak_mrr = "elk_peak_mrr"
    life_organizer_revenue = "life_organizer_revenue"
    friendly_tech_revenue = "friendly_tech_revenue"
    runtime_pm_users = "runtime_pm_users"
    runtime_pm_mrr = "runtime_pm_mrr"
    custom = "custom"


class QuarterGoal(Base):
    __tablename__ = "quarter_goal"
    __table_args__ = (
        CheckConstraint("quarter >= 1 AND quarter <= 4", name="ck_quarter_goal_quarter"),
        Index("idx_quarter_goal_quarter_year", "quarter", "year"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    target_value = Column(Float, nullable=False)
    # Only stored for metric_type=custom; auto types are computed on read.
    current_value = Column(Float, nullable=True)
    quarter = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    metric_type = Column(String(50), nullable=False, default=GoalMetricType.custom.value)
    order = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
