import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from elkpeak.core.gateway import public_gateway
from elkpeak.core.rate_limit import CONTACT_SUBMIT
from elkpeak.db.session import get_db_session
from elkpeak.models.contact import ContactStatus, ContactSubmission
from elkpeak.schemas.common import parse_data
from elkpeak.schemas.contact import ContactSubmit
from elkpeak.services.notifier import notify_contact_submission

router = APIRouter(tags=["contact"])
logger = logging.getLogger("elk.store")


@router.post("/contact", dependencies=[Depends(public_gateway(CONTACT_SUBMIT))])
def submit_contact(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: Session = Depends(get_db_session),
) -> Dict[str, Any]:
    data = parse_data(ContactSubmit, payload)
    sub = ContactSubmission(
        name=data.name,
        email=data.email,
        company=data.company,
        message=data.message,
        status=ContactStatus.new.value,
    )
    db.add(sub)
    db.commit()
    db.refresh(sub)
    logger.info("contact_submitted id=%s", sub.id)

    notify_contact_submission(sub)
    return {"success": True, "message": "Message sent successfully", "id": sub.id}
