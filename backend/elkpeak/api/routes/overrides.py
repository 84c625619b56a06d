from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from elkpeak.core.errors import ValidationError
from elkpeak.core.gateway import admin_gateway
from elkpeak.core.rate_limit import METRIC_OVERRIDES
from elkpeak.db.base import row_to_dict
from elkpeak.db.session import get_db_session
from elkpeak.models.override import MetricOverride
from elkpeak.schemas.common import OperationRequest, parse_data
from elkpeak.schemas.override import OverrideKey, OverrideSet
from elkpeak.services.credentials import AuthResult
from elkpeak.services.metrics import is_overridable
from elkpeak.services.store import upsert

router = APIRouter(prefix="/metric-overrides", tags=["metric-overrides"])


def _check_key(company: str, metric_key: str) -> None:
    if not is_overridable(company, metric_key):
        raise ValidationError(f"Unknown metric: {company}:{metric_key}")


@router.post("")
def metric_overrides(
    payload: OperationRequest,
    db: Session = Depends(get_db_session),
    auth: AuthResult = Depends(admin_gateway(METRIC_OVERRIDES)),
):
    op = payload.operation

    if op == "list":
        rows = db.query(MetricOverride).order_by(MetricOverride.company, MetricOverride.metric_key).all()
        return [row_to_dict(r) for r in rows]

    if op == "set":
        req = parse_data(OverrideSet, payload.data)
        _check_key(req.company, req.metric_key)
        row = upsert(
            db,
            MetricOverride,
            {"company": req.company, "metric_key": req.metric_key, "value": req.value, "updated_by": auth.name},
            conflict_cols=("company", "metric_key"),
        )
        return row_to_dict(row)

    if op == "delete":
        req = parse_data(OverrideKey, payload.data)
        _check_key(req.company, req.metric_key)
        db.query(MetricOverride).filter(
            MetricOverride.company == req.company,
            MetricOverride.metric_key == req.metric_key,
        ).delete()
        db.commit()
        return {"success": True}

    raise ValidationError("Invalid operation. Must be: list, set, or delete")
