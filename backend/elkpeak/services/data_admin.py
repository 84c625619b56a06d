"""
Generic admin CRUD over the allow-listed business tables.

The table name from the request is only ever used as a key into
MANAGED_TABLES; queries are built from the mapped ORM model.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from elkpeak.core.errors import NotFoundError, ValidationError
from elkpeak.db.base import Base, row_to_dict
from elkpeak.models.elk_peak import ElkPeakClient, ElkPeakProject
from elkpeak.models.friendly_tech import FriendlyTechDay, FriendlyTechHoaClient
from elkpeak.models.life_organizer import LifeOrganizerKdpSale, LifeOrganizerNotionSale
from elkpeak.models.runtime_pm import RuntimePMSubscription, RuntimePMUser
from elkpeak.schemas import business
from elkpeak.schemas.common import parse_data


@dataclass(frozen=True)
class ManagedTable:
    model: Type[Base]
    create: Type[BaseModel]
    update: Type[BaseModel]

    @property
    def fields(self) -> List[str]:
        return list(self.update.model_fields)


MANAGED_TABLES: Dict[str, ManagedTable] = {
    "elk_peak_clients": ManagedTable(ElkPeakClient, business.ElkPeakClientCreate, business.ElkPeakClientUpdate),
    "elk_peak_projects": ManagedTable(ElkPeakProject, business.ElkPeakProjectCreate, business.ElkPeakProjectUpdate),
    "life_organizer_kdp_sales": ManagedTable(LifeOrganizerKdpSale, business.SaleCreate, business.SaleUpdate),
    "life_organizer_notion_sales": ManagedTable(LifeOrganizerNotionSale, business.SaleCreate, business.SaleUpdate),
    "friendly_tech_days": ManagedTable(FriendlyTechDay, business.TechDayCreate, business.TechDayUpdate),
    "friendly_tech_hoa_clients": ManagedTable(
        FriendlyTechHoaClient, business.HoaClientCreate, business.HoaClientUpdate
    ),
    "runtime_pm_users": ManagedTable(RuntimePMUser, business.RuntimeUserCreate, business.RuntimeUserUpdate),
    "runtime_pm_subscriptions": ManagedTable(
        RuntimePMSubscription, business.SubscriptionCreate, business.SubscriptionUpdate
    ),
}


def get_table(name: Optional[str]) -> ManagedTable:
    table = MANAGED_TABLES.get(name or "")
    if table is None:
        raise ValidationError("Invalid table. Allowed tables: " + ", ".join(sorted(MANAGED_TABLES)))
    return table


def _require_id(row_id: Any, operation: str) -> str:
    if not isinstance(row_id, str) or not row_id.strip():
        raise ValidationError(f"Valid ID is required for {operation}")
    return row_id


def list_rows(db: Session, table: ManagedTable, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    model = table.model
    q = db.query(model)
    filters = dict(filters or {})
    row_id = filters.pop("id", None)
    if row_id is not None:
        q = q.filter(model.id == str(row_id))
    if filters:
        unknown = sorted(k for k in filters if k not in table.fields)
        if unknown:
            raise ValidationError("Invalid filter fields: " + ", ".join(unknown))
        # Typed through the update schema so dates and numbers compare correctly.
        typed = parse_data(table.update, filters).dict(exclude_unset=True)
        for field, value in typed.items():
            q = q.filter(getattr(model, field) == value)
    return [row_to_dict(r) for r in q.order_by(model.created_at.desc()).all()]


def create_row(db: Session, table: ManagedTable, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not data:
        raise ValidationError("Data object is required for create")
    payload = parse_data(table.create, data)
    row = table.model(**payload.dict())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row_to_dict(row)


def update_row(db: Session, table: ManagedTable, row_id: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    row_id = _require_id(row_id, "update")
    if not data:
        raise ValidationError("Data object is required for update")
    changes = parse_data(table.update, data).dict(exclude_unset=True)
    columns = table.model.__table__.c
    for field, value in changes.items():
        if value is None and not columns[field].nullable:
            raise ValidationError(f"{field} cannot be null")

    row = db.query(table.model).filter(table.model.id == row_id).first()
    if row is None:
        raise NotFoundError("Record not found")
    for field, value in changes.items():
        setattr(row, field, value)
    db.commit()
    db.refresh(row)
    return row_to_dict(row)


def delete_row(db: Session, table: ManagedTable, row_id: Any) -> None:
    row_id = _require_id(row_id, "delete")
    db.query(table.model).filter(table.model.id == row_id).delete()
    db.commit()
