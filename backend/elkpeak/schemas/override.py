from pydantic import BaseModel, Field


class OverrideKey(BaseModel):
    company: str = Field(..., min_length=1, max_length=50)
    metric_key: str = Field(..., min_length=1, max_length=100)


class OverrideSet(OverrideKey):
    value: float = Field(..., allow_inf_nan=False)
