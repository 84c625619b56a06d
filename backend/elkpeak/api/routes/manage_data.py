from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from elkpeak.core.errors import ValidationError
from elkpeak.core.gateway import admin_gateway
from elkpeak.core.rate_limit import MANAGE_DATA
from elkpeak.db.session import get_db_session
from elkpeak.services import data_admin

router = APIRouter(prefix="/admin/manage-data", tags=["admin"])


class ManageDataPayload(BaseModel):
    operation: str = Field(..., min_length=1)
    table: Optional[str] = None
    id: Optional[Any] = None
    data: Optional[Dict[str, Any]] = None
    filters: Optional[Dict[str, Any]] = None


@router.post("", dependencies=[Depends(admin_gateway(MANAGE_DATA))])
def manage_data(payload: ManageDataPayload, db: Session = Depends(get_db_session)):
    """
    Generic CRUD for the business tables listed in data_admin.MANAGED_TABLES.
    """
    op = payload.operation
    if op not in ("list", "create", "update", "delete"):
        raise ValidationError("Invalid operation. Must be: create, update, delete, or list")

    # Table is resolved against the registry before any query is built
    table = data_admin.get_table(payload.table)

    if op == "list":
        return data_admin.list_rows(db, table, payload.filters)
    if op == "create":
        return data_admin.create_row(db, table, payload.data)
    if op == "update":
        return data_admin.update_row(db, table, payload.id, payload.data)

    data_admin.delete_row(db, table, payload.id)
    return {"success": True}
