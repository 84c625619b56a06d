from typing import Optional

from pydantic import BaseModel, Field, validator

from elkpeak.models.goal import GoalMetricType


class GoalListRequest(BaseModel):
    quarter: int = Field(..., ge=1, le=4, strict=True)
    year: int = Field(..., ge=2020, le=2100, strict=True)


class GoalCreate(BaseModel):
    name: str
    target_value: float = Field(..., ge=0, allow_inf_nan=False)
    current_value: Optional[float] = Field(None, allow_inf_nan=False)
    quarter: int = Field(..., ge=1, le=4, strict=True)
    year: int = Field(..., ge=2020, le=2100, strict=True)
    metric_type: GoalMetricType = GoalMetricType.custom
    order: Optional[int] = None

    @validator("name")
    def name_length(cls, v):
        if not v or len(v) > 200:
            raise ValueError("Name must be between 1 and 200 characters")
        return v

    class Config:
        extra = "forbid"


class GoalUpdate(BaseModel):
    name: Optional[str] = None
    target_value: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    current_value: Optional[float] = Field(None, allow_inf_nan=False)
    order: Optional[int] = None

    @validator("name")
    def name_length(cls, v):
        if v is not None and (not v or len(v) > 200):
            raise ValueError("Name must be between 1 and 200 characters")
        return v

    class Config:
        # id, quarter, year and metric_type are immutable once created
        extra = "forbid"


class GoalUpdateRequest(BaseModel):
    id: str = Field(..., min_length=1)
    updates: GoalUpdate
