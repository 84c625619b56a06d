import logging
from typing import Optional

import httpx

from elkpeak.core.config import get_settings
from elkpeak.models.contact import ContactSubmission

logger = logging.getLogger("elk.notify")


def _body(sub: ContactSubmission) -> str:
    lines = [
        "New contact form submission",
        "",
        f"Name: {sub.name}",
        f"Email: {sub.email}",
    ]
    if sub.company:
        lines.append(f"Company: {sub.company}")
    lines += ["", sub.message]
    return "\n".join(lines)


def notify_contact_submission(sub: ContactSubmission, client: Optional[httpx.Client] = None) -> bool:
    """
    Email a new contact submission through Resend. Best-effort: any failure is
    logged and reported as False, never raised.
    """
    settings = get_settings()
    if not settings.resend_api_key or not settings.resend_to_email:
        return False

    payload = {
        "from": settings.resend_from_email,
        "to": [settings.resend_to_email],
        "reply_to": sub.email,
        "subject": f"New contact from {sub.name}",
        "text": _body(sub),
    }
    headers = {"Authorization": f"Bearer {settings.resend_api_key}"}
    try:
        if client is not None:
            resp = client.post(settings.resend_api_url, json=payload, headers=headers)
        else:
            with httpx.Client(timeout=10.0) as c:
                resp = c.post(settings.resend_api_url, json=payload, headers=headers)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("contact_notify_failed id=%s error=%s", sub.id, type(e).__name__)
        return False
    logger.info("contact_notify_sent id=%s", sub.id)
    return True
