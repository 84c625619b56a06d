from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from elkpeak.core.errors import ValidationError
from elkpeak.core.gateway import admin_gateway
from elkpeak.core.rate_limit import MONTHLY_LOGS
from elkpeak.db.session import get_db_session
from elkpeak.schemas.common import OperationRequest
from elkpeak.services.monthly_logs import LOG_OPERATIONS, delete_monthly_log, log_monthly

router = APIRouter(prefix="/monthly-logs", tags=["monthly-logs"])


@router.post("", dependencies=[Depends(admin_gateway(MONTHLY_LOGS))])
def monthly_logs(payload: OperationRequest, db: Session = Depends(get_db_session)):
    op = payload.operation
    if op in LOG_OPERATIONS:
        return log_monthly(db, op, payload.data)
    if op == "deleteMonthlyLog":
        delete_monthly_log(db, payload.data)
        return {"success": True}
    raise ValidationError("Invalid operation")
