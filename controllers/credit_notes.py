from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.errors import NotFoundError
from db.session import get_db
from helpers import invalidate_dashboard
from queries.credit_notes import get_credit_note, list_credit_notes
from schemas.credit_note import CreditNoteCreate, CreditNoteOut
from schemas.responses import ApiResponse
from services import documents

router = APIRouter(prefix="/credit-notes", tags=["credit-notes"])


@router.get("", response_model=ApiResponse[list[CreditNoteOut]])
def get_credit_notes(
    limit: int = Query(500, ge=1, le=500),
    party_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: Session = Depends(get_db),
):
    rows = list_credit_notes(db, party_id=party_id, date_from=date_from, date_to=date_to, limit=limit)
    return ApiResponse(data=[CreditNoteOut.model_validate(cn) for cn in rows])


@router.post("", status_code=201, response_model=ApiResponse[CreditNoteOut])
def create_credit_note(payload: CreditNoteCreate, request: Request, db: Session = Depends(get_db)):
    cn = documents.create_credit_note(db, payload)
    invalidate_dashboard(request.app.state)
    return ApiResponse(data=CreditNoteOut.model_validate(cn))


@router.get("/{credit_note_id}", response_model=ApiResponse[CreditNoteOut])
def get_credit_note_by_id(credit_note_id: int, db: Session = Depends(get_db)):
    cn = get_credit_note(db, credit_note_id)
    if cn is None:
        raise NotFoundError(f"Credit note {credit_note_id} not found")
    return ApiResponse(data=CreditNoteOut.model_validate(cn))


@router.delete("/{credit_note_id}", response_model=ApiResponse[dict])
def delete_credit_note(credit_note_id: int, request: Request, db: Session = Depends(get_db)):
    documents.delete_credit_note(db, credit_note_id)
    invalidate_dashboard(request.app.state)
    return ApiResponse(data={"deleted": credit_note_id})
