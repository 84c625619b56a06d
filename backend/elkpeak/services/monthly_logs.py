import logging
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from elkpeak.core.errors import ValidationError
from elkpeak.db.base import Base, row_to_dict
from elkpeak.models.elk_peak import ElkPeakMonthlyEngagements, ElkPeakMonthlyMRR, ElkPeakMonthlyRevenue
from elkpeak.models.friendly_tech import FriendlyTechMonthlyMetrics
from elkpeak.models.life_organizer import LifeOrganizerMonthlyRevenue
from elkpeak.models.organization import OrganizationMonthlyCost
from elkpeak.models.runtime_pm import RuntimePMMonthlyMetrics
from elkpeak.schemas import monthly_log as s
from elkpeak.schemas.common import parse_data
from elkpeak.services.store import upsert

logger = logging.getLogger("elk.store")

MONTHLY_LOG_TABLES: Dict[str, Type[Base]] = {
    m.__tablename__: m
    for m in (
        ElkPeakMonthlyRevenue,
        ElkPeakMonthlyMRR,
        ElkPeakMonthlyEngagements,
        LifeOrganizerMonthlyRevenue,
        FriendlyTechMonthlyMetrics,
        RuntimePMMonthlyMetrics,
        OrganizationMonthlyCost,
    )
}

# operation -> (payload schema, target table)
LOG_OPERATIONS: Dict[str, Tuple[Type[BaseModel], Type[Base]]] = {
    "logElkPeakRevenue": (s.ElkPeakRevenueLog, ElkPeakMonthlyRevenue),
    "logElkPeakMRR": (s.ElkPeakMRRLog, ElkPeakMonthlyMRR),
    "logElkPeakEngagements": (s.ElkPeakEngagementsLog, ElkPeakMonthlyEngagements),
    "logLifeOrganizerRevenue": (s.LifeOrganizerRevenueLog, LifeOrganizerMonthlyRevenue),
    "logFriendlyTechMetrics": (s.FriendlyTechMetricsLog, FriendlyTechMonthlyMetrics),
    "logRuntimePMMetrics": (s.RuntimePMMetricsLog, RuntimePMMonthlyMetrics),
    "logOrganizationCosts": (s.OrganizationCostsLog, OrganizationMonthlyCost),
}


def log_monthly(db: Session, operation: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Upsert one month's values; a second write for the same period replaces the first."""
    schema, model = LOG_OPERATIONS[operation]
    payload = parse_data(schema, data)
    row = upsert(db, model, payload.dict(), conflict_cols=("year", "month"))
    logger.info("monthly_log_upserted table=%s period=%s-%02d", model.__tablename__, payload.year, payload.month)
    return row_to_dict(row)


def delete_monthly_log(db: Session, data: Optional[Dict[str, Any]]) -> None:
    payload = parse_data(s.DeleteMonthlyLog, data)
    model = MONTHLY_LOG_TABLES.get(payload.table)
    if model is None:
        raise ValidationError("Invalid table")
    db.query(model).filter(model.year == payload.year, model.month == payload.month).delete()
    db.commit()
