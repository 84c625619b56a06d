from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


API_CSP = "; ".join(
    [
        "default-src 'none'",
        "base-uri 'none'",
        "object-src 'none'",
        "frame-ancestors 'none'",
        "form-action 'none'",
    ]
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Browser hardening headers for every gateway response.

    Dashboard payloads carry business figures, so responses are also marked
    non-cacheable.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Content-Security-Policy", API_CSP)
        if request.method == "POST":
            response.headers.setdefault("Cache-Control", "no-store")

        # HSTS only over HTTPS (TLS terminates at the proxy; rely on x-forwarded-proto)
        proto = (request.headers.get("x-forwarded-proto") or request.url.scheme or "").lower()
        if proto == "https":
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")

        return response
