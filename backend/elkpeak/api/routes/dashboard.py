from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from elkpeak.core.gateway import admin_gateway
from elkpeak.core.rate_limit import DASHBOARD_METRICS
from elkpeak.db.session import get_db_session
from elkpeak.services.metrics import aggregate_metrics

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.post("/metrics", dependencies=[Depends(admin_gateway(DASHBOARD_METRICS))])
def dashboard_metrics(db: Session = Depends(get_db_session)) -> Dict[str, Any]:
    """Aggregated metrics and monthly series for every business, overrides applied."""
    return aggregate_metrics(db)
