import json
import logging
import os
import time
import uuid
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram
from sentry_sdk.integrations.fastapi import FastApiIntegration
from starlette.middleware.base import BaseHTTPMiddleware

from elkpeak.core.config import get_settings


_REQ_COUNT = Counter(
    "elk_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)
_REQ_LATENCY = Histogram(
    "elk_http_request_duration_seconds",
    "HTTP request duration (seconds)",
    ["method", "route"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)

_UNTRACKED_ROUTES = ("/metrics", "/health", "/healthz", "/readyz")


def _release() -> Optional[str]:
    return os.getenv("GIT_SHA") or os.getenv("RENDER_GIT_COMMIT") or None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Adds a request ID and logs one JSON line per request on `elk.http`.
    Client errors log at WARNING, server errors at ERROR.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.time()
        logger = logging.getLogger("elk.http")
        payload = {
            "event": "http_request",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "release": _release(),
        }
        try:
            response = await call_next(request)
        except Exception:
            payload.update(
                event="http_exception",
                status_code=500,
                duration_ms=int((time.time() - start) * 1000),
            )
            logger.exception(json.dumps(payload, ensure_ascii=False))
            raise

        route_obj = request.scope.get("route")
        route = getattr(route_obj, "path", None) or request.url.path
        payload.update(
            route=route,
            status_code=response.status_code,
            duration_ms=int((time.time() - start) * 1000),
        )

        if response.status_code >= 500:
            logger.error(json.dumps(payload, ensure_ascii=False))
        elif response.status_code >= 400:
            logger.warning(json.dumps(payload, ensure_ascii=False))
        else:
            logger.info(json.dumps(payload, ensure_ascii=False))

        if route not in _UNTRACKED_ROUTES:
            _REQ_COUNT.labels(request.method, route, str(response.status_code)).inc()
            _REQ_LATENCY.labels(request.method, route).observe(time.time() - start)

        response.headers["X-Request-ID"] = request_id
        return response


def configure_logging() -> None:
    """Configure a sane default logging setup for the backend."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    # Ensure our loggers are visible even if uvicorn already configured logging
    for name in ("elk.http", "elk.tracing", "elk.auth", "elk.store", "elk.ratelimit", "elk.notify"):
        logging.getLogger(name).setLevel(logging.INFO)


def init_tracing(app: FastAPI) -> None:
    """
    Attach request logging and, if SENTRY_DSN is configured, Sentry error tracing.
    """
    settings = get_settings()
    configure_logging()

    app.add_middleware(RequestLoggingMiddleware)

    dsn = settings.sentry_dsn
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=(settings.sentry_env or settings.environment),
        release=_release(),
        integrations=[FastApiIntegration()],
        # Can be overridden in env; keep low by default
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.05")),
        # Request bodies may contain the admin password.
        send_default_pii=False,
    )
    logging.getLogger("elk.tracing").info("Sentry tracing initialized")
