from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.sql import func

from elkpeak.db.base import Base, new_id


class AdminCredential(Base):
    """
    Shared dashboard credential. Provisioned by hand (scripts/hash_password.py);
    the API only ever reads these rows.
    """

    __tablename__ = "admin_password"

    id = Column(String(36), primary_key=True, default=new_id)
    # bcrypt ("$2b$...") or legacy PBKDF2 ("iterations$salt_b64$hash_b64")
    password_hash = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
