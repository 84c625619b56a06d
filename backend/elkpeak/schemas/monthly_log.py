from typing import Optional

from pydantic import BaseModel, Field

from elkpeak.schemas.common import PeriodPayload


class _LogBase(PeriodPayload):
    notes: Optional[str] = None


class ElkPeakRevenueLog(_LogBase):
    revenue: float = Field(..., ge=0, allow_inf_nan=False)


class ElkPeakMRRLog(_LogBase):
    mrr: float = Field(..., ge=0, allow_inf_nan=False)


class ElkPeakEngagementsLog(_LogBase):
    count: int = Field(..., ge=0)


class LifeOrganizerRevenueLog(_LogBase):
    kdp_revenue: float = Field(0, ge=0, allow_inf_nan=False)
    notion_revenue: float = Field(0, ge=0, allow_inf_nan=False)
    etsy_revenue: float = Field(0, ge=0, allow_inf_nan=False)
    gumroad_revenue: float = Field(0, ge=0, allow_inf_nan=False)


class FriendlyTechMetricsLog(_LogBase):
    revenue: float = Field(..., ge=0, allow_inf_nan=False)
    tech_days: int = Field(..., ge=0)


class RuntimePMMetricsLog(_LogBase):
    active_users: int = Field(..., ge=0)
    revenue: float = Field(..., ge=0, allow_inf_nan=False)
    active_subscriptions: int = Field(..., ge=0)


class OrganizationCostsLog(_LogBase):
    cost: float = Field(..., ge=0, allow_inf_nan=False)


class DeleteMonthlyLog(PeriodPayload):
    table: str
