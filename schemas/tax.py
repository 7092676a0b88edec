from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.invoice import STATE_CODE, LineItemIn


class TaxComputeIn(BaseModel):
    """
    Preview of a document's totals. Missing state codes fall back to the
    company's state (intra-state); a missing gst_rate is resolved from the
    catalog items referenced by the lines, then the company default.
    """

    items: List[LineItemIn] = []
    packaging_charges: Decimal = Decimal("0")
    supplier_state_code: Optional[str] = Field(None, pattern=STATE_CODE)
    counterparty_state_code: Optional[str] = Field(None, pattern=STATE_CODE)
    gst_rate: Optional[Decimal] = None


class TaxBreakdownOut(BaseModel):
    amount_before_tax: float
    packaging_charges: float
    sub_total: float
    gst_rate: float
    is_inter_state: bool
    cgst_rate: float
    cgst_amount: float
    sgst_rate: float
    sgst_amount: float
    igst_rate: float
    igst_amount: float
    grand_total: float
    amount_in_words: str
    formatted_total: str
