from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.payment import PaymentOut

STATE_CODE = r"^[0-9]{2}$"


class LineItemIn(BaseModel):
    """One row of the item grid. Empty rows are allowed and dropped server-side."""

    item_id: Optional[int] = None
    description: str = ""
    hsn_code: Optional[str] = None
    quantity: Decimal = Decimal("0")
    unit: str = "Pcs"
    rate: Decimal = Decimal("0")


class InvoiceCreate(BaseModel):
    invoice_number: Optional[int] = None  # defaults to the company counter
    is_draft: bool = False
    invoice_date: date
    due_date: Optional[date] = None

    party_id: Optional[int] = None
    party_gstin: Optional[str] = None
    billed_to_name: Optional[str] = None
    billed_to_address: Optional[str] = None
    billed_to_state: Optional[str] = None
    billed_to_state_code: Optional[str] = Field(None, pattern=STATE_CODE)

    shipped_to_name: Optional[str] = None
    shipped_to_address: Optional[str] = None
    shipped_to_state: Optional[str] = None
    shipped_to_state_code: Optional[str] = Field(None, pattern=STATE_CODE)
    shipped_to_phone: Optional[str] = None

    transport_mode: Optional[str] = None
    vehicle_number: Optional[str] = None
    gr_rr_number: Optional[str] = None
    place_of_supply: Optional[str] = None
    place_of_supply_state_code: Optional[str] = Field(None, pattern=STATE_CODE)
    total_packages: Optional[int] = Field(None, ge=0)

    packaging_charges: Decimal = Decimal("0")
    reverse_charge: bool = False
    notes: Optional[str] = None

    items: List[LineItemIn] = []
    save_new_items: bool = False  # add unknown descriptions to the item catalog


class InvoiceFinalize(BaseModel):
    invoice_number: Optional[int] = None


class InvoiceItemOut(BaseModel):
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


class InvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: Optional[int] = None
    is_draft: bool
    invoice_date: date
    due_date: Optional[date] = None

    party_id: Optional[int] = None
    party_gstin: Optional[str] = None
    billed_to_name: str
    billed_to_address: Optional[str] = None
    billed_to_state: Optional[str] = None
    billed_to_state_code: Optional[str] = None
    shipped_to_name: Optional[str] = None
    shipped_to_address: Optional[str] = None
    shipped_to_state: Optional[str] = None
    shipped_to_state_code: Optional[str] = None
    shipped_to_phone: Optional[str] = None

    transport_mode: Optional[str] = None
    vehicle_number: Optional[str] = None
    gr_rr_number: Optional[str] = None
    place_of_supply: Optional[str] = None
    place_of_supply_state_code: Optional[str] = None
    total_packages: Optional[int] = None

    amount_before_tax: float
    packaging_charges: float
    sub_total: float
    cgst_rate: Optional[float] = None
    cgst_amount: Optional[float] = None
    sgst_rate: Optional[float] = None
    sgst_amount: Optional[float] = None
    igst_rate: Optional[float] = None
    igst_amount: Optional[float] = None
    grand_total: float
    amount_in_words: Optional[str] = None

    reverse_charge: bool = False
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    items: List[InvoiceItemOut] = []
    payments: List[PaymentOut] = []

    # derived, filled by the controller
    paid_amount: float = 0.0
    balance_due: float = 0.0
    payment_status: Optional[str] = None
