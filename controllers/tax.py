from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db.session import get_db
from schemas.responses import ApiResponse
from schemas.tax import TaxBreakdownOut, TaxComputeIn
from services.amount_words import format_indian_currency
from services.documents import preview_tax

router = APIRouter(prefix="/tax", tags=["tax"])


@router.post("/compute", response_model=ApiResponse[TaxBreakdownOut])
def compute(payload: TaxComputeIn, db: Session = Depends(get_db)):
    """Live totals for the invoice / credit note form. Nothing is saved."""
    breakdown = preview_tax(
        db,
        payload.items,
        packaging_charges=payload.packaging_charges,
        supplier_state_code=payload.supplier_state_code,
        counterparty_state_code=payload.counterparty_state_code,
        gst_rate=payload.gst_rate,
    )
    return ApiResponse(
        data=TaxBreakdownOut(
            **breakdown.as_dict(),
            formatted_total=format_indian_currency(breakdown.grand_total),
        )
    )
