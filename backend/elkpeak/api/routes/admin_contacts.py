from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from elkpeak.core.errors import NotFoundError, ValidationError
from elkpeak.core.gateway import admin_gateway
from elkpeak.core.rate_limit import ADMIN_CONTACTS
from elkpeak.db.base import row_to_dict
from elkpeak.db.session import get_db_session
from elkpeak.models.contact import ContactSubmission
from elkpeak.schemas.common import IdPayload, OperationRequest, parse_data
from elkpeak.schemas.contact import ContactList, ContactNotes, ContactStatusUpdate

router = APIRouter(prefix="/admin/contacts", tags=["admin"])


def _get(db: Session, sub_id: str) -> ContactSubmission:
    sub = db.query(ContactSubmission).filter(ContactSubmission.id == sub_id).first()
    if sub is None:
        raise NotFoundError("Submission not found")
    return sub


@router.post("", dependencies=[Depends(admin_gateway(ADMIN_CONTACTS))])
def admin_contacts(payload: OperationRequest, db: Session = Depends(get_db_session)):
    op = payload.operation

    if op == "list":
        req = parse_data(ContactList, payload.data)
        q = db.query(ContactSubmission)
        if req.status is not None:
            q = q.filter(ContactSubmission.status == req.status.value)
        rows = q.order_by(ContactSubmission.submitted_at.desc()).limit(req.limit).all()
        return [row_to_dict(r) for r in rows]

    if op == "updateStatus":
        req = parse_data(ContactStatusUpdate, payload.data)
        sub = _get(db, req.id)
        sub.status = req.status.value
        db.commit()
        db.refresh(sub)
        return row_to_dict(sub)

    if op == "addNotes":
        req = parse_data(ContactNotes, payload.data)
        sub = _get(db, req.id)
        sub.notes = req.notes
        db.commit()
        db.refresh(sub)
        return row_to_dict(sub)

    if op == "delete":
        req = parse_data(IdPayload, payload.data)
        db.query(ContactSubmission).filter(ContactSubmission.id == req.id).delete()
        db.commit()
        return {"success": True}

    raise ValidationError("Invalid operation")
