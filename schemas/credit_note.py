from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.invoice import STATE_CODE, LineItemIn


class CreditNoteCreate(BaseModel):
    credit_note_number: Optional[int] = None  # defaults to the company counter
    credit_note_date: date
    original_invoice_id: Optional[int] = None

    party_id: Optional[int] = None
    party_gstin: Optional[str] = None
    party_name: Optional[str] = None
    party_address: Optional[str] = None
    party_state: Optional[str] = None
    party_state_code: Optional[str] = Field(None, pattern=STATE_CODE)

    reason: Optional[str] = None
    notes: Optional[str] = None
    items: List[LineItemIn] = []


class CreditNoteItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    serial_number: int
    item_id: Optional[int] = None
    description: str
    hsn_code: Optional[str] = None
    quantity: float
    unit: str
    rate: float
    amount: float


class CreditNoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    credit_note_number: int
    credit_note_date: date
    original_invoice_id: Optional[int] = None

    party_id: Optional[int] = None
    party_gstin: Optional[str] = None
    party_name: str
    party_address: Optional[str] = None
    party_state: Optional[str] = None
    party_state_code: Optional[str] = None

    reason: str
    amount_before_tax: float
    cgst_rate: Optional[float] = None
    cgst_amount: Optional[float] = None
    sgst_rate: Optional[float] = None
    sgst_amount: Optional[float] = None
    igst_rate: Optional[float] = None
    igst_amount: Optional[float] = None
    total_amount: float
    amount_in_words: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    items: List[CreditNoteItemOut] = []
