import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from elkpeak.core.config import get_settings
from elkpeak.core.errors import NotFoundError, ValidationError
from elkpeak.db.base import row_to_dict
from elkpeak.models.goal import GoalMetricType, QuarterGoal
from elkpeak.schemas.goal import GoalCreate, GoalUpdate
from elkpeak.services.metrics import aggregate_metrics

logger = logging.getLogger("elk.store")

# metric_type -> (company, metric key) in the aggregated metrics
GOAL_METRIC_SOURCES = {
    GoalMetricType.elk_peak_mrr.value: ("elkPeak", "monthlyRecurringRevenue"),
    GoalMetricType.life_organizer_revenue.value: ("lifeOrganizer", "totalRevenue"),
    GoalMetricType.friendly_tech_revenue.value: ("friendlyTech", "totalRevenue"),
    GoalMetricType.runtime_pm_users.value: ("runtimePM", "activeUsers"),
    GoalMetricType.runtime_pm_mrr.value: ("runtimePM", "monthlyRecurringRevenue"),
}


def compute_progress(current: float, target: float) -> float:
    """Percent of target reached, clamped to [0, 100]."""
    if target <= 0:
        return 100.0 if current >= 0 else 0.0
    return min(max(current / target, 0.0), 1.0) * 100.0


def _metrics_for(db: Session, quarter: int, year: int) -> Dict[str, Dict[str, Any]]:
    if get_settings().goal_progress_scope == "quarter":
        return aggregate_metrics(db, period=(quarter, year))
    return aggregate_metrics(db)


def current_value(goal: QuarterGoal, metrics: Optional[Dict[str, Dict[str, Any]]]) -> float:
    source = GOAL_METRIC_SOURCES.get(goal.metric_type)
    if source is None or metrics is None:
        return float(goal.current_value or 0)
    company, key = source
    return float(metrics[company].get(key) or 0)


def serialize_goal(goal: QuarterGoal, metrics: Optional[Dict[str, Dict[str, Any]]]) -> Dict[str, Any]:
    out = row_to_dict(goal)
    cur = current_value(goal, metrics)
    target = float(goal.target_value or 0)
    out["current_value"] = cur
    out["progress"] = compute_progress(cur, target)
    out["completed"] = cur >= target
    return out


def _serialize_one(db: Session, goal: QuarterGoal) -> Dict[str, Any]:
    metrics = None
    if goal.metric_type in GOAL_METRIC_SOURCES:
        metrics = _metrics_for(db, goal.quarter, goal.year)
    return serialize_goal(goal, metrics)


def list_goals(db: Session, quarter: int, year: int) -> List[Dict[str, Any]]:
    goals = (
        db.query(QuarterGoal)
        .filter(QuarterGoal.quarter == quarter, QuarterGoal.year == year)
        .order_by(QuarterGoal.order.is_(None), QuarterGoal.order.asc(), QuarterGoal.created_at.asc())
        .all()
    )
    metrics = None
    if any(g.metric_type in GOAL_METRIC_SOURCES for g in goals):
        metrics = _metrics_for(db, quarter, year)
    return [serialize_goal(g, metrics) for g in goals]


def create_goal(db: Session, payload: GoalCreate) -> Dict[str, Any]:
    values = payload.dict()
    values["metric_type"] = payload.metric_type.value
    goal = QuarterGoal(**values)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    logger.info("goal_created id=%s metric_type=%s", goal.id, goal.metric_type)
    return _serialize_one(db, goal)


def _get_goal(db: Session, goal_id: str) -> QuarterGoal:
    goal = db.query(QuarterGoal).filter(QuarterGoal.id == goal_id).first()
    if goal is None:
        raise NotFoundError("Goal not found")
    return goal


def update_goal(db: Session, goal_id: str, updates: GoalUpdate) -> Dict[str, Any]:
    changes = updates.dict(exclude_unset=True)
    if not changes:
        raise ValidationError("Updates object is required")
    if "name" in changes and changes["name"] is None:
        raise ValidationError("Name must be between 1 and 200 characters")
    if "target_value" in changes and changes["target_value"] is None:
        raise ValidationError("Target value must be a positive number")

    goal = _get_goal(db, goal_id)
    if "current_value" in changes and goal.metric_type != GoalMetricType.custom.value:
        raise ValidationError("current_value can only be set on custom goals")

    for field, value in changes.items():
        setattr(goal, field, value)
    db.commit()
    db.refresh(goal)
    return _serialize_one(db, goal)


def delete_goal(db: Session, goal_id: str) -> None:
    db.query(QuarterGoal).filter(QuarterGoal.id == goal_id).delete()
    db.commit()
