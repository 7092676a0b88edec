from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class AgedInvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_id: int
    invoice_number: Optional[int] = None
    party_id: Optional[int] = None
    billed_to_name: Optional[str] = None
    invoice_date: date
    due_date: Optional[date] = None
    grand_total: float
    paid: float
    due: float
    days_overdue: int


class AgingBucketOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    total: float
    invoices: List[AgedInvoiceOut] = []


class AgingReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    as_of: date
    buckets: List[AgingBucketOut]
    grand_total: float


class PartyOutstandingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    party_id: int
    name: str
    total: float
    paid: float
    due: float
    invoice_count: int


class Gstr1SummaryOut(BaseModel):
    total_invoices: int
    b2b_count: int
    b2b_total: float
    b2cs_count: int
    b2cs_total: float
    b2cl_count: int
    b2cl_total: float
    credit_notes_count: int
    credit_notes_total: float
    total_tax: float
    grand_total: float


class Gstr1ReportOut(BaseModel):
    month: int
    year: int
    summary: Gstr1SummaryOut
    payload: Dict[str, Any]
