from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from db.session import get_db
from queries.company_settings import get_company_settings
from queries.credit_notes import list_credit_notes
from queries.invoices import list_final_invoices, list_payments
from queries.parties import list_parties
from schemas.reports import AgingBucketOut, AgingReportOut, Gstr1ReportOut, Gstr1SummaryOut, PartyOutstandingOut
from schemas.responses import ApiResponse
from services.gstr1 import (
    Gstr1Policy,
    build_gstr1_csv_rows,
    build_gstr1_payload,
    classify,
    filter_period,
    gstr1_summary,
    render_csv,
)
from services.ledger import build_aging, outstanding_by_party

router = APIRouter(prefix="/reports", tags=["reports"])

# every credit note of a month; the list endpoint's 500 cap does not apply here
_ALL = 100_000


def _period_documents(db: Session, month: int, year: int):
    invoices = filter_period(list_final_invoices(db), month, year, "invoice_date")
    credit_notes = filter_period(list_credit_notes(db, limit=_ALL), month, year, "credit_note_date")
    return invoices, credit_notes


@router.get("/aging", response_model=ApiResponse[AgingReportOut])
def aging_report(
    as_of: date | None = Query(None, description="defaults to today"),
    db: Session = Depends(get_db),
):
    """Outstanding receivables bucketed by days past due."""
    as_of = as_of or date.today()
    invoices = list_final_invoices(db)
    payments = list_payments(db)
    report = build_aging(invoices, payments, as_of)
    return ApiResponse(
        data=AgingReportOut(
            as_of=as_of,
            buckets=[AgingBucketOut.model_validate(b) for b in report.buckets],
            grand_total=report.grand_total,
        )
    )


@router.get("/outstanding", response_model=ApiResponse[list[PartyOutstandingOut]])
def outstanding_report(db: Session = Depends(get_db)):
    invoices = list_final_invoices(db)
    payments = list_payments(db)
    names = {p.id: p.name for p in list_parties(db, limit=_ALL)}
    rows = outstanding_by_party(invoices, payments, party_names=names)
    return ApiResponse(data=[PartyOutstandingOut.model_validate(r) for r in rows])


@router.get("/gstr1", response_model=ApiResponse[Gstr1ReportOut])
def gstr1_report(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2017, le=2100),
    db: Session = Depends(get_db),
):
    """
    GSTR-1 for one month: section summary plus the JSON payload in the
    filing schema (b2b / b2cl / b2cs / cdnr).
    """
    company = get_company_settings(db)
    policy = Gstr1Policy.from_settings()
    invoices, credit_notes = _period_documents(db, month, year)

    summary = gstr1_summary(classify(invoices, company.state_code, policy), credit_notes)
    payload = build_gstr1_payload(
        invoices,
        credit_notes,
        company_gstin=company.gstin or "",
        company_state_code=company.state_code,
        month=month,
        year=year,
        policy=policy,
    )
    return ApiResponse(
        data=Gstr1ReportOut(month=month, year=year, summary=Gstr1SummaryOut(**summary), payload=payload)
    )


@router.get("/gstr1.csv")
def gstr1_csv(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2017, le=2100),
    db: Session = Depends(get_db),
):
    company = get_company_settings(db)
    invoices, credit_notes = _period_documents(db, month, year)
    rows = build_gstr1_csv_rows(invoices, credit_notes, company.state_code, Gstr1Policy.from_settings())
    return Response(
        content=render_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="GSTR1_{month:02d}_{year}.csv"'},
    )
