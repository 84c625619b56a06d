from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from elkpeak.core.errors import ValidationError
from elkpeak.core.gateway import admin_gateway
from elkpeak.core.rate_limit import GOALS
from elkpeak.db.session import get_db_session
from elkpeak.schemas.common import IdPayload, OperationRequest, parse_data
from elkpeak.schemas.goal import GoalCreate, GoalListRequest, GoalUpdateRequest
from elkpeak.services import goals as goal_service

router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", dependencies=[Depends(admin_gateway(GOALS))])
def goals(payload: OperationRequest, db: Session = Depends(get_db_session)):
    op = payload.operation

    if op == "list":
        req = parse_data(GoalListRequest, payload.data)
        return goal_service.list_goals(db, req.quarter, req.year)

    if op == "create":
        return goal_service.create_goal(db, parse_data(GoalCreate, payload.data))

    if op == "update":
        req = parse_data(GoalUpdateRequest, payload.data)
        return goal_service.update_goal(db, req.id, req.updates)

    if op == "delete":
        req = parse_data(IdPayload, payload.data)
        goal_service.delete_goal(db, req.id)
        return {"success": True}

    raise ValidationError("Invalid operation. Must be: list, create, update, or delete")
