from typing import Dict, Iterable, Optional
from urllib.parse import urlsplit
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from elkpeak.core.config import get_settings
import logging


ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "authorization, x-client-info, apikey, content-type, x-admin-password"


def _host(value: str) -> str:
    try:
        return (urlsplit(value).hostname or "").lower()
    except ValueError:
        return ""


def origin_matches(value: Optional[str], allowed: Iterable[str]) -> bool:
    """
    True when `value` (an Origin or Referer) belongs to an allow-list entry.

    Entries may be full origins ("https://elkpeak.com") matched as a prefix, or
    bare domains ("elkpeak.com") matched against the host and its subdomains.
    """
    if not value:
        return False
    host = _host(value)
    for entry in allowed:
        entry = entry.strip().rstrip("/")
        if not entry:
            continue
        if "://" in entry:
            if value == entry or value.startswith(entry + "/"):
                return True
            continue
        domain = entry.lower()
        if host == domain or host.endswith("." + domain):
            return True
    return False


def is_request_allowed(request: Request, allowed: Iterable[str]) -> bool:
    allowed = list(allowed)
    if not allowed:
        return True
    return origin_matches(request.headers.get("origin"), allowed) or origin_matches(
        request.headers.get("referer"), allowed
    )


def cors_headers(origin: Optional[str], allowed: Iterable[str]) -> Dict[str, str]:
    allowed = list(allowed)
    if not allowed:
        allow_origin = origin or "*"
    elif origin_matches(origin, allowed):
        allow_origin = origin  # type: ignore[assignment]
    else:
        allow_origin = "null"
    headers = {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Max-Age": "86400",
    }
    if allow_origin not in ("*", "null"):
        headers["Vary"] = "Origin"
    return headers


class GatewayCORSMiddleware(BaseHTTPMiddleware):
    """CORS for the request gateway.

    - OPTIONS preflights always answer 200 with the computed headers, even for
      origins outside the allow-list (the browser then refuses the call).
    - Every other response gets the same headers; origin enforcement itself is
      a gateway guard so that it produces a JSON 403.
    """

    async def dispatch(self, request: Request, call_next):
        allowed = get_settings().origin_allow_list()
        headers = cors_headers(request.headers.get("origin"), allowed)

        if request.method == "OPTIONS":
            if allowed and not is_request_allowed(request, allowed):
                logging.getLogger("elk.http").info(
                    "cors_preflight_unlisted path=%s origin=%s",
                    request.url.path,
                    request.headers.get("origin") or "",
                )
            return Response("ok", status_code=200, headers=headers)

        response = await call_next(request)
        for k, v in headers.items():
            response.headers.setdefault(k, v)
        return response
