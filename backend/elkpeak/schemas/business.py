"""
Create/update payloads for the generic data-management endpoint.

Each business table gets a pair of schemas whose fields are exactly the
columns an admin may write. Unknown fields are rejected, so the schema doubles
as the per-table field allow-list.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

_MONEY = dict(ge=0, allow_inf_nan=False)


class _Strict(BaseModel):
    class Config:
        extra = "forbid"


# --- Elk Peak -----------------------------------------------------------------

class ElkPeakClientCreate(_Strict):
    name: str = Field(..., min_length=1, max_length=255)
    status: str = Field("active", max_length=20)
    monthly_revenue: Optional[float] = Field(0, **_MONEY)
    start_date: Optional[datetime.date] = None
    notes: Optional[str] = None


class ElkPeakClientUpdate(_Strict):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[str] = Field(None, max_length=20)
    monthly_revenue: Optional[float] = Field(None, **_MONEY)
    start_date: Optional[datetime.date] = None
    notes: Optional[str] = None


class ElkPeakProjectCreate(_Strict):
    name: str = Field(..., min_length=1, max_length=255)
    client_id: Optional[str] = Field(None, max_length=36)
    revenue: Optional[float] = Field(0, **_MONEY)
    status: Optional[str] = Field("active", max_length=20)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    notes: Optional[str] = None


class ElkPeakProjectUpdate(_Strict):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    client_id: Optional[str] = Field(None, max_length=36)
    revenue: Optional[float] = Field(None, **_MONEY)
    status: Optional[str] = Field(None, max_length=20)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    notes: Optional[str] = None


# --- Life Organizer -----------------------------------------------------------

class SaleCreate(_Strict):
    date: datetime.date
    units: Optional[int] = Field(0, ge=0)
    revenue: Optional[float] = Field(0, **_MONEY)
    product_name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class SaleUpdate(_Strict):
    date: Optional[datetime.date] = None
    units: Optional[int] = Field(None, ge=0)
    revenue: Optional[float] = Field(None, **_MONEY)
    product_name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


# --- Friendly Tech ------------------------------------------------------------

class TechDayCreate(_Strict):
    date: datetime.date
    hoa_client_id: Optional[str] = Field(None, max_length=36)
    revenue: Optional[float] = Field(0, **_MONEY)
    hours: Optional[int] = Field(0, ge=0)
    sessions_count: Optional[int] = Field(0, ge=0)
    notes: Optional[str] = None


class TechDayUpdate(_Strict):
    date: Optional[datetime.date] = None
    hoa_client_id: Optional[str] = Field(None, max_length=36)
    revenue: Optional[float] = Field(None, **_MONEY)
    hours: Optional[int] = Field(None, ge=0)
    sessions_count: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class HoaClientCreate(_Strict):
    name: str = Field(..., min_length=1, max_length=255)
    status: str = Field("active", max_length=20)
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class HoaClientUpdate(_Strict):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[str] = Field(None, max_length=20)
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


# --- Runtime PM ---------------------------------------------------------------

class RuntimeUserCreate(_Strict):
    email: str = Field(..., min_length=3, max_length=255)
    status: str = Field("active", max_length=20)
    signup_date: datetime.date
    last_active_date: Optional[datetime.date] = None
    subscription_tier: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class RuntimeUserUpdate(_Strict):
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    status: Optional[str] = Field(None, max_length=20)
    signup_date: Optional[datetime.date] = None
    last_active_date: Optional[datetime.date] = None
    subscription_tier: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class SubscriptionCreate(_Strict):
    user_id: Optional[str] = Field(None, max_length=36)
    status: str = Field("active", max_length=20)
    monthly_amount: Optional[float] = Field(0, **_MONEY)
    start_date: datetime.date
    end_date: Optional[datetime.date] = None
    notes: Optional[str] = None


class SubscriptionUpdate(_Strict):
    user_id: Optional[str] = Field(None, max_length=36)
    status: Optional[str] = Field(None, max_length=20)
    monthly_amount: Optional[float] = Field(None, **_MONEY)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    notes: Optional[str] = None
