import re
from typing import Optional

from pydantic import BaseModel, Field, validator

from elkpeak.models.contact import ContactStatus

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ContactSubmit(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    message: Optional[str] = None

    @validator("name", always=True)
    def name_length(cls, v):
        v = v or ""
        if len(v) > 100 or not v.strip():
            raise ValueError("Name must be between 1 and 100 characters")
        return v.strip()

    @validator("email", always=True)
    def email_format(cls, v):
        v = (v or "").strip()
        if not EMAIL_RE.match(v):
            raise ValueError("Valid email address is required")
        return v.lower()

    @validator("company")
    def company_length(cls, v):
        if v is None:
            return None
        if len(v) > 100:
            raise ValueError("Company name must be 100 characters or less")
        return v.strip() or None

    @validator("message", always=True)
    def message_length(cls, v):
        v = v or ""
        if len(v) > 1000 or not v.strip():
            raise ValueError("Message must be between 1 and 1000 characters")
        return v.strip()


class ContactList(BaseModel):
    status: Optional[ContactStatus] = None
    limit: int = Field(50, ge=1, le=500)


class ContactStatusUpdate(BaseModel):
    id: str = Field(..., min_length=1)
    status: ContactStatus


class ContactNotes(BaseModel):
    id: str = Field(..., min_length=1)
    notes: str
