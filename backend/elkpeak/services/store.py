from typing import Any, Dict, Sequence, Type

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from elkpeak.db.base import Base, new_id


def upsert(db: Session, model: Type[Base], values: Dict[str, Any], conflict_cols: Sequence[str]) -> Any:
    """
    Insert `values`, or update the row that already holds the same
    `conflict_cols` values. Returns the stored row.

    Uses the database's native ON CONFLICT DO UPDATE (PostgreSQL or SQLite).
    """
    table = model.__table__
    dialect = db.get_bind().dialect.name
    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert

    row = {"id": new_id(), **values}
    stmt = insert(table).values(**row)
    update_cols = {k: stmt.excluded[k] for k in values if k not in conflict_cols}
    if "updated_at" in table.c:
        update_cols["updated_at"] = func.now()
    stmt = stmt.on_conflict_do_update(index_elements=list(conflict_cols), set_=update_cols)
    db.execute(stmt)
    db.commit()

    q = db.query(model)
    for col in conflict_cols:
        q = q.filter(getattr(model, col) == values[col])
    return q.one()
