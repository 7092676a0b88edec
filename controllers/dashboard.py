from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.config import settings
from db.session import get_db
from helpers import DASHBOARD_PREFIX, cache_get, cache_set
from queries.invoices import count_invoices, list_final_invoices, list_invoices, list_payments
from schemas.responses import ApiResponse
from services.ledger import PaymentStatus, paid_by_invoice, payment_status
from services.tax_engine import ZERO

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=ApiResponse[dict])
def dashboard_summary(
    request: Request,
    recent: int = Query(5, ge=0, le=50),
    db: Session = Depends(get_db),
):
    """
    Dashboard summary (DB-driven):
    - sales / received / outstanding totals
    - this month's sales
    - invoice counts by payment status, drafts
    Uses TTL cache; any invoice / payment write clears it.
    """
    cache = request.app.state.ttl_cache
    cache_key = f"{DASHBOARD_PREFIX}summary:recent={recent}"
    cached = cache_get(cache, cache_key)
    if cached is not None:
        return ApiResponse(data=cached)

    today = date.today()
    invoices = list_final_invoices(db)
    paid = paid_by_invoice(list_payments(db, [inv.id for inv in invoices]))

    total_sales = total_received = total_outstanding = this_month = ZERO
    status_counts = {s.value: 0 for s in PaymentStatus}
    for inv in invoices:
        inv_paid = paid.get(inv.id, ZERO)
        total_sales += Decimal(inv.grand_total)
        total_received += inv_paid
        total_outstanding += max(ZERO, Decimal(inv.grand_total) - inv_paid)
        if inv.invoice_date.year == today.year and inv.invoice_date.month == today.month:
            this_month += Decimal(inv.grand_total)
        status_counts[payment_status(inv, inv_paid, today).value] += 1

    latest = list_invoices(db, is_draft=False, limit=recent) if recent else []

    data = {
        "total_invoices": len(invoices),
        "draft_invoices": count_invoices(db, is_draft=True),
        "total_sales": float(total_sales),
        "total_received": float(total_received),
        "total_outstanding": float(total_outstanding),
        "this_month_sales": float(this_month),
        "status_counts": status_counts,
        "recent_invoices": [
            {
                "id": inv.id,
                "invoice_number": inv.invoice_number,
                "invoice_date": inv.invoice_date.isoformat(),
                "billed_to_name": inv.billed_to_name,
                "grand_total": float(inv.grand_total),
            }
            for inv in latest
        ],
        "meta": {"recent": recent},
    }

    cache_set(cache, cache_key, data, ttl_seconds=settings.DASHBOARD_TTL_SECONDS)
    return ApiResponse(data=data)
