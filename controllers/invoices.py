from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.errors import NotFoundError
from db.session import get_db
from helpers import invalidate_dashboard
from models.invoice import Invoice
from queries.invoices import get_invoice, list_invoices
from schemas.invoice import InvoiceCreate, InvoiceFinalize, InvoiceOut
from schemas.payment import PaymentCreate, PaymentOut
from schemas.responses import ApiResponse
from services import documents
from services.ledger import payment_status
from services.tax_engine import ZERO, round_money

router = APIRouter(prefix="/invoices", tags=["invoices"])


def invoice_out(inv: Invoice, today: date, include_items: bool = True) -> InvoiceOut:
    """ORM invoice -> response, with paid / balance / status derived from its payments."""
    out = InvoiceOut.model_validate(inv)
    if not include_items:
        out.items = []

    paid = sum((Decimal(p.amount) for p in (inv.payments or [])), ZERO)
    out.paid_amount = float(round_money(paid))
    out.balance_due = float(round_money(Decimal(inv.grand_total or 0) - paid))
    if not inv.is_draft:
        out.payment_status = payment_status(inv, paid, today).value
    return out


@router.get("", response_model=ApiResponse[list[InvoiceOut]])
def get_invoices(
    limit: int = Query(500, ge=1, le=500),
    include_items: bool = Query(True),
    party_id: int | None = Query(None),
    is_draft: bool | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Invoices, newest first.
    include_items=false returns the list without line items (list page).
    """
    rows = list_invoices(
        db,
        party_id=party_id,
        is_draft=is_draft,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )
    today = date.today()
    return ApiResponse(data=[invoice_out(inv, today, include_items) for inv in rows])


@router.post("", status_code=201, response_model=ApiResponse[InvoiceOut])
def create_invoice(payload: InvoiceCreate, request: Request, db: Session = Depends(get_db)):
    """
    Save an invoice (or a draft when is_draft=true).
    invoice_number defaults to the company counter; a taken number => 409.
    """
    inv = documents.create_invoice(db, payload)
    invalidate_dashboard(request.app.state)
    return ApiResponse(data=invoice_out(inv, date.today()))


@router.get("/{invoice_id}", response_model=ApiResponse[InvoiceOut])
def get_invoice_by_id(invoice_id: int, db: Session = Depends(get_db)):
    inv = get_invoice(db, invoice_id)
    if inv is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    return ApiResponse(data=invoice_out(inv, date.today()))


@router.delete("/{invoice_id}", response_model=ApiResponse[dict])
def delete_invoice(invoice_id: int, request: Request, db: Session = Depends(get_db)):
    documents.delete_invoice(db, invoice_id)
    invalidate_dashboard(request.app.state)
    return ApiResponse(data={"deleted": invoice_id})


@router.post("/{invoice_id}/finalize", response_model=ApiResponse[InvoiceOut])
def finalize_invoice(
    invoice_id: int,
    request: Request,
    payload: InvoiceFinalize | None = None,
    db: Session = Depends(get_db),
):
    inv = documents.finalize_draft(db, invoice_id, payload.invoice_number if payload else None)
    invalidate_dashboard(request.app.state)
    return ApiResponse(data=invoice_out(inv, date.today()))


@router.post("/{invoice_id}/duplicate", status_code=201, response_model=ApiResponse[InvoiceOut])
def duplicate_invoice(invoice_id: int, request: Request, db: Session = Depends(get_db)):
    inv = documents.duplicate_invoice(db, invoice_id, today=date.today())
    invalidate_dashboard(request.app.state)
    return ApiResponse(data=invoice_out(inv, date.today()))


@router.post("/{invoice_id}/payments", status_code=201, response_model=ApiResponse[PaymentOut])
def add_payment(invoice_id: int, payload: PaymentCreate, request: Request, db: Session = Depends(get_db)):
    payment = documents.add_payment(db, invoice_id, payload)
    invalidate_dashboard(request.app.state)
    return ApiResponse(data=PaymentOut.model_validate(payment))
