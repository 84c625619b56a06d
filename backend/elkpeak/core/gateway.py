"""
Guard chain shared by every gateway router.

Order: API key (when configured) -> origin allow-list -> rate limit -> admin
password (admin routers only). Each guard raises a GatewayError, so the first
failing check decides the response.
"""

import hmac
import logging
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from elkpeak.core.config import get_settings
from elkpeak.core.errors import AuthError, Forbidden
from elkpeak.core.rate_limit import RatePolicy, enforce_rate_limit, get_client_ip
from elkpeak.core.security import is_request_allowed
from elkpeak.db.session import get_db_session
from elkpeak.services.credentials import AuthResult, verify_password

logger = logging.getLogger("elk.auth")

ADMIN_PASSWORD_HEADER = "x-admin-password"


def check_api_key(request: Request) -> None:
    expected = get_settings().api_key
    if not expected:
        return
    auth = request.headers.get("authorization") or ""
    if not auth:
        raise AuthError("Authorization required")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(token.strip().encode(), expected.encode()):
        raise Forbidden("Invalid API key")


def check_origin(request: Request) -> None:
    if not is_request_allowed(request, get_settings().origin_allow_list()):
        logger.warning(
            "origin_rejected path=%s origin=%s ip=%s",
            request.url.path,
            request.headers.get("origin") or request.headers.get("referer") or "",
            get_client_ip(request),
        )
        raise Forbidden("Origin not allowed")


def require_admin(request: Request, db: Session) -> AuthResult:
    password = request.headers.get(ADMIN_PASSWORD_HEADER)
    if not password:
        raise AuthError()
    result = verify_password(db, password)
    if not result.valid:
        raise Forbidden()
    return result


def public_gateway(policy: RatePolicy) -> Callable:
    """Guards for unauthenticated endpoints."""

    def guard(request: Request) -> None:
        check_api_key(request)
        check_origin(request)
        enforce_rate_limit(request, policy)

    return guard


def admin_gateway(policy: RatePolicy) -> Callable:
    """Guards for admin endpoints; resolves to the verified credential."""

    def guard(request: Request, db: Session = Depends(get_db_session)) -> AuthResult:
        check_api_key(request)
        check_origin(request)
        enforce_rate_limit(request, policy)
        return require_admin(request, db)

    return guard
