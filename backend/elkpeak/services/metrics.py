"""
Dashboard metrics aggregation.

Reads the per-business tables, derives the headline numbers, then applies
manual overrides from `business_metrics_overrides`.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy.orm import Session

from elkpeak.db.base import Base, row_to_dict
from elkpeak.models.elk_peak import (
    ElkPeakClient,
    ElkPeakProject,
    ElkPeakMonthlyRevenue,
    ElkPeakMonthlyMRR,
    ElkPeakMonthlyEngagements,
)
from elkpeak.models.friendly_tech import FriendlyTechDay, FriendlyTechHoaClient, FriendlyTechMonthlyMetrics
from elkpeak.models.life_organizer import LifeOrganizerMonthlyRevenue
from elkpeak.models.organization import OrganizationMonthlyCost
from elkpeak.models.override import MetricOverride
from elkpeak.models.runtime_pm import RuntimePMMonthlyMetrics, RuntimePMSubscription, RuntimePMUser

ACTIVE = "active"

# company -> metric keys that an override row may replace
OVERRIDABLE_KEYS: Dict[str, Tuple[str, ...]] = {
    "elkPeak": ("activeClients", "recurringClients", "monthlyRecurringRevenue", "totalRevenue", "totalProjects"),
    "lifeOrganizer": (
        "totalKDPRevenue",
        "totalNotionRevenue",
        "totalEtsyRevenue",
        "totalGumroadRevenue",
        "totalRevenue",
        "activeRuntimePMUsers",
    ),
    "friendlyTech": ("totalRevenue", "activeHOAClients", "totalSessions"),
    "runtimePM": ("activeUsers", "totalSubscriptions", "monthlyRecurringRevenue", "totalRevenue"),
}

Period = Tuple[int, int]  # (quarter, year)


def is_overridable(company: str, metric_key: str) -> bool:
    return metric_key in OVERRIDABLE_KEYS.get(company, ())


def quarter_months(quarter: int) -> List[int]:
    first = (quarter - 1) * 3 + 1
    return [first, first + 1, first + 2]


def _num(value: Any) -> float:
    return float(value or 0)


def _monthly(db: Session, model: Type[Base], period: Optional[Period]) -> List[Any]:
    """Monthly-log rows, newest first, optionally limited to one quarter."""
    q = db.query(model)
    if period is not None:
        quarter, year = period
        q = q.filter(model.year == year, model.month.in_(quarter_months(quarter)))
    return q.order_by(model.year.desc(), model.month.desc()).all()


def _count_active(db: Session, model: Type[Base]) -> int:
    return db.query(model).filter(model.status == ACTIVE).count()


def _series(rows: List[Any]) -> List[Dict[str, Any]]:
    return [row_to_dict(r) for r in rows]


def load_overrides(db: Session) -> Dict[str, float]:
    """Override values keyed "company:metric_key"."""
    return {f"{o.company}:{o.metric_key}": o.value for o in db.query(MetricOverride).all()}


def _apply_overrides(metrics: Dict[str, Dict[str, Any]], overrides: Dict[str, float]) -> None:
    for company, keys in OVERRIDABLE_KEYS.items():
        block = metrics[company]
        for key in keys:
            value = overrides.get(f"{company}:{key}")
            if value is not None:
                block[key] = value


def _elk_peak(db: Session, period: Optional[Period]) -> Dict[str, Any]:
    clients = db.query(ElkPeakClient).all()
    active = [c for c in clients if c.status == ACTIVE]
    revenue_rows = _monthly(db, ElkPeakMonthlyRevenue, period)
    mrr_rows = _monthly(db, ElkPeakMonthlyMRR, period)
    engagement_rows = _monthly(db, ElkPeakMonthlyEngagements, period)

    if mrr_rows:
        mrr = _num(mrr_rows[0].mrr)
    else:
        mrr = sum(_num(c.monthly_revenue) for c in active)

    return {
        "activeClients": len(active),
        "recurringClients": sum(1 for c in active if _num(c.monthly_revenue) > 0),
        "monthlyRecurringRevenue": mrr,
        "totalRevenue": sum(_num(r.revenue) for r in revenue_rows),
        "totalProjects": db.query(ElkPeakProject).count(),
        "monthlyRevenue": _series(revenue_rows),
        "monthlyMRR": _series(mrr_rows),
        "monthlyEngagements": _series(engagement_rows),
    }


def _life_organizer(db: Session, period: Optional[Period]) -> Dict[str, Any]:
    rows = _monthly(db, LifeOrganizerMonthlyRevenue, period)
    kdp = sum(_num(r.kdp_revenue) for r in rows)
    notion = sum(_num(r.notion_revenue) for r in rows)
    etsy = sum(_num(r.etsy_revenue) for r in rows)
    gumroad = sum(_num(r.gumroad_revenue) for r in rows)
    return {
        "totalKDPRevenue": kdp,
        "totalNotionRevenue": notion,
        "totalEtsyRevenue": etsy,
        "totalGumroadRevenue": gumroad,
        "totalRevenue": kdp + notion + etsy + gumroad,
        "activeRuntimePMUsers": _count_active(db, RuntimePMUser),
        "monthlyRevenue": _series(rows),
    }


def _friendly_tech(db: Session, period: Optional[Period]) -> Dict[str, Any]:
    rows = _monthly(db, FriendlyTechMonthlyMetrics, period)
    return {
        "totalRevenue": sum(_num(r.revenue) for r in rows),
        "activeHOAClients": _count_active(db, FriendlyTechHoaClient),
        "totalSessions": db.query(FriendlyTechDay).count(),
        "monthlyMetrics": _series(rows),
    }


def _runtime_pm(db: Session, period: Optional[Period]) -> Dict[str, Any]:
    rows = _monthly(db, RuntimePMMonthlyMetrics, period)
    latest = rows[0] if rows else None

    if latest is not None:
        active_users = int(latest.active_users or 0)
        subscriptions = int(latest.active_subscriptions or 0)
        mrr = _num(latest.revenue)
    else:
        active_subs = (
            db.query(RuntimePMSubscription).filter(RuntimePMSubscription.status == ACTIVE).all()
        )
        active_users = _count_active(db, RuntimePMUser)
        subscriptions = len(active_subs)
        mrr = sum(_num(s.monthly_amount) for s in active_subs)

    return {
        "activeUsers": active_users,
        "totalSubscriptions": subscriptions,
        "monthlyRecurringRevenue": mrr,
        "totalRevenue": sum(_num(r.revenue) for r in rows),
        "monthlyMetrics": _series(rows),
    }


def _organization(db: Session, period: Optional[Period]) -> Dict[str, Any]:
    rows = _monthly(db, OrganizationMonthlyCost, period)
    return {
        "totalCosts": sum(_num(r.cost) for r in rows),
        "monthlyCosts": _series(rows),
    }


def aggregate_metrics(db: Session, period: Optional[Period] = None) -> Dict[str, Dict[str, Any]]:
    """
    Derived metrics for every business, overrides applied.

    `period=(quarter, year)` limits monthly-log sums, "latest month" lookups and
    series to that quarter's three months. Live-table counts are never
    date-scoped.
    """
    metrics = {
        "elkPeak": _elk_peak(db, period),
        "lifeOrganizer": _life_organizer(db, period),
        "friendlyTech": _friendly_tech(db, period),
        "runtimePM": _runtime_pm(db, period),
        "organization": _organization(db, period),
    }
    _apply_overrides(metrics, load_overrides(db))
    return metrics
