import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def row_to_dict(row) -> dict:
    """Column values of an ORM row keyed by column name."""
    return {c.name: getattr(row, c.key) for c in row.__mapper__.columns}
