import hmac

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from elkpeak.core.config import get_settings
from elkpeak.core.errors import Forbidden, NotFoundError

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def prometheus_metrics(request: Request) -> Response:
    """
    Prometheus scrape endpoint.

    In production it stays hidden (404) until METRICS_TOKEN is set, and then
    requires `Authorization: Bearer <token>`.
    """
    settings = get_settings()
    token = settings.metrics_token

    if settings.environment == "production":
        if not token:
            raise NotFoundError()
        auth = request.headers.get("authorization") or ""
        if not hmac.compare_digest(auth.encode(), f"Bearer {token}".encode()):
            raise Forbidden("Forbidden")

    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
