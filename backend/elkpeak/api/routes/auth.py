from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from elkpeak.core.errors import ValidationError
from elkpeak.core.gateway import public_gateway
from elkpeak.core.rate_limit import AUTH_VERIFY
from elkpeak.db.session import get_db_session
from elkpeak.schemas.auth import AuthVerifyRequest
from elkpeak.services.credentials import verify_password

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/verify", dependencies=[Depends(public_gateway(AUTH_VERIFY))])
def verify(
    payload: Optional[AuthVerifyRequest] = None,
    db: Session = Depends(get_db_session),
):
    """
    Check the dashboard password. Every failure looks the same to the caller.
    """
    password = payload.password if payload is not None else None
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required")

    result = verify_password(db, password)
    if not result.valid:
        return JSONResponse(status_code=401, content={"valid": False, "error": "Invalid password"})
    return {"valid": True, "isAdmin": result.is_admin, "name": result.name}
