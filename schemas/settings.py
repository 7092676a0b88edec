from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.invoice import STATE_CODE


class CompanySettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_name: str
    gstin: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    state: Optional[str] = None
    state_code: str
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    default_terms: Optional[str] = None
    next_invoice_number: int
    next_credit_note_number: int
    default_gst_rate: float


class CompanySettingsUpdate(BaseModel):
    company_name: Optional[str] = None
    gstin: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[str] = Field(None, pattern=STATE_CODE)
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    default_terms: Optional[str] = None
    next_invoice_number: Optional[int] = Field(None, ge=1)
    next_credit_note_number: Optional[int] = Field(None, ge=1)
    default_gst_rate: Optional[Decimal] = Field(None, ge=0, le=100)
