from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.constants import state_name
from core.errors import NotFoundError
from db.session import get_db
from queries import parties as q
from queries.invoices import list_final_invoices, list_payments
from schemas.party import GstinDetailsOut, LedgerEntryOut, PartyIn, PartyLedgerOut, PartyOut, PartySummaryOut, PartyUpdate
from schemas.responses import ApiResponse
from services.gstin_client import GstinClient
from services.ledger import build_ledger, party_summary
from services.validation import normalize_gstin, state_code_from_gstin

router = APIRouter(prefix="/parties", tags=["parties"])


def _clean(values: dict) -> dict:
    """Normalize GSTIN; derive state from it when the form left state empty."""
    if "gstin" in values:
        values["gstin"] = normalize_gstin(values["gstin"])
        if values["gstin"] and not values.get("state_code"):
            values["state_code"] = state_code_from_gstin(values["gstin"])
    if values.get("state_code") and not values.get("state"):
        values["state"] = state_name(values["state_code"])
    return values


def _get_or_404(db: Session, party_id: int):
    row = q.get_party(db, party_id)
    if row is None:
        raise NotFoundError(f"Party {party_id} not found")
    return row


@router.get("", response_model=ApiResponse[list[PartyOut]])
def get_parties(
    search: str | None = Query(None),
    limit: int = Query(500, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return ApiResponse(data=[PartyOut.model_validate(p) for p in q.list_parties(db, search=search, limit=limit)])


@router.post("", status_code=201, response_model=ApiResponse[PartyOut])
def create_party(payload: PartyIn, db: Session = Depends(get_db)):
    row = q.create_party(db, _clean(payload.model_dump()))
    return ApiResponse(data=PartyOut.model_validate(row))


@router.get("/gstin/{gstin}", response_model=ApiResponse[GstinDetailsOut])
async def lookup_gstin(gstin: str):
    """Registered name / address for a GSTIN (external gstincheck service)."""
    details = await GstinClient().lookup(gstin)
    return ApiResponse(data=GstinDetailsOut(**details))


@router.get("/{party_id}", response_model=ApiResponse[PartyOut])
def get_party(party_id: int, db: Session = Depends(get_db)):
    return ApiResponse(data=PartyOut.model_validate(_get_or_404(db, party_id)))


@router.put("/{party_id}", response_model=ApiResponse[PartyOut])
def update_party(party_id: int, payload: PartyUpdate, db: Session = Depends(get_db)):
    row = _get_or_404(db, party_id)
    row = q.update_party(db, row, _clean(payload.model_dump(exclude_unset=True)))
    return ApiResponse(data=PartyOut.model_validate(row))


@router.delete("/{party_id}", response_model=ApiResponse[dict])
def delete_party(party_id: int, db: Session = Depends(get_db)):
    q.delete_party(db, _get_or_404(db, party_id))
    return ApiResponse(data={"deleted": party_id})


@router.get("/{party_id}/ledger", response_model=ApiResponse[PartyLedgerOut])
def party_ledger(party_id: int, db: Session = Depends(get_db)):
    """
    Statement of account: issued invoices (debit) and their payments
    (credit) with a running balance.
    """
    party = _get_or_404(db, party_id)
    invoices = list_final_invoices(db, party_id=party_id)
    payments = list_payments(db, [inv.id for inv in invoices])

    entries = build_ledger(invoices, payments)
    return ApiResponse(
        data=PartyLedgerOut(
            party=PartyOut.model_validate(party),
            summary=PartySummaryOut(**party_summary(invoices, payments)),
            entries=[LedgerEntryOut.model_validate(e) for e in entries],
        )
    )
