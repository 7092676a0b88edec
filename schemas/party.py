import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.invoice import STATE_CODE


class PartyIn(BaseModel):
    name: str = Field(..., min_length=1)
    gstin: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[str] = Field(None, pattern=STATE_CODE)
    phone: Optional[str] = None
    email: Optional[str] = None
    payment_terms: Optional[str] = None


class PartyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    gstin: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[str] = Field(None, pattern=STATE_CODE)
    phone: Optional[str] = None
    email: Optional[str] = None
    payment_terms: Optional[str] = None


class PartyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    gstin: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    payment_terms: Optional[str] = None


class LedgerEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: datetime.date
    type: str
    reference: str
    description: str
    debit: float
    credit: float
    balance: float
    id: Optional[int] = None


class PartySummaryOut(BaseModel):
    total_invoices: int
    total_amount: float
    total_paid: float
    total_due: float


class PartyLedgerOut(BaseModel):
    party: PartyOut
    summary: PartySummaryOut
    entries: List[LedgerEntryOut] = []


class GstinDetailsOut(BaseModel):
    gstin: str
    trade_name: Optional[str] = None
    legal_name: Optional[str] = None
    address: Optional[str] = None
    state_code: str
    state_name: Optional[str] = None
    pincode: Optional[str] = None
    status: Optional[str] = None
    registration_date: Optional[str] = None
    business_type: Optional[str] = None
    dealer_type: Optional[str] = None
