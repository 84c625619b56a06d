from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
import enum

from elkpeak.db.base import Base, new_id


class ContactStatus(str, enum.Enum):
    new = "new"
    read = "read"
    replied = "replied"
    archived = "archived"


class ContactSubmission(Base):
    __tablename__ = "contact_submissions"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    company = Column(String(100), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=ContactStatus.new.value, index=True)
    notes = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
