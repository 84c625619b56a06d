from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from elkpeak.core.errors import ValidationError, format_validation_errors

T = TypeVar("T", bound=BaseModel)


class OperationRequest(BaseModel):
    """Body shared by the operation-dispatch endpoints: {"operation", "data"}."""

    operation: str = Field(..., min_length=1)
    data: Optional[Dict[str, Any]] = None


def parse_data(schema: Type[T], data: Optional[Dict[str, Any]]) -> T:
    """Validate an operation's `data` object, raising a 400 that names the field."""
    try:
        return schema.model_validate(data or {})
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc.errors()))


class IdPayload(BaseModel):
    id: str = Field(..., min_length=1, max_length=36)


class PeriodPayload(BaseModel):
    year: int = Field(..., ge=2020, le=2100, strict=True)
    month: int = Field(..., ge=1, le=12, strict=True)
