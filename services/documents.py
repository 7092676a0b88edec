"""
Invoice / credit note / payment writes.

Each public function is one unit of work on the session it is given:
validate -> compute tax -> allocate number -> insert -> advance counter ->
commit. Either the document (with its lines) and the counter move land
together, or nothing does.
"""

from datetime import date, timedelta
from typing import Any, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.constants import PAYMENT_TERMS
from core.errors import DuplicateNumberError, NotFoundError, ValidationError
from core.logger import log
from models.credit_note import CreditNote, CreditNoteItem
from models.invoice import Invoice, InvoiceItem, Payment
from models.party import Item
from queries.company_settings import advance_counter, get_company_settings
from queries import credit_notes as credit_note_rows
from queries.credit_notes import credit_note_number_exists, get_credit_note
from queries import invoices as invoice_rows
from queries.invoices import get_invoice, get_payment, invoice_number_exists
from queries.parties import find_item_by_name, get_items_by_ids, get_party
from services.numbering import NumberAllocation, allocate_number
from services.records import as_date, get_field
from services.tax_engine import (
    TaxBreakdown,
    compute_tax,
    line_amount,
    resolve_gst_rate,
    resolve_supply_state_code,
    storage_tax_fields,
)
from services.validation import normalize_gstin, require_party_name, require_reason, validate_line_items

INVOICE = "Invoice"
CREDIT_NOTE = "Credit Note"

# copied verbatim by duplicate_invoice
_INVOICE_COPY_FIELDS = (
    "party_id", "party_gstin",
    "billed_to_name", "billed_to_address", "billed_to_state", "billed_to_state_code",
    "shipped_to_name", "shipped_to_address", "shipped_to_state", "shipped_to_state_code", "shipped_to_phone",
    "transport_mode", "vehicle_number", "gr_rr_number",
    "place_of_supply", "place_of_supply_state_code", "total_packages",
    "amount_before_tax", "packaging_charges", "sub_total",
    "cgst_rate", "cgst_amount", "sgst_rate", "sgst_amount", "igst_rate", "igst_amount",
    "grand_total", "amount_in_words", "reverse_charge", "notes",
)


# --------------------------------------------------
# helpers
# --------------------------------------------------

def _with_catalog_rates(db: Session, raw_lines: list) -> list[dict]:
    """Attach the referenced catalog item's gst_rate to each line."""
    raw_lines = list(raw_lines or [])
    ids = [get_field(line, "item_id") for line in raw_lines if get_field(line, "item_id") is not None]
    catalog = get_items_by_ids(db, ids)

    out = []
    for line in raw_lines:
        item_id = get_field(line, "item_id")
        item = None
        if item_id is not None:
            item = catalog.get(item_id)
            if item is None:
                raise NotFoundError(f"Item {item_id} not found", details={"item_id": item_id})
        out.append({
            "item_id": item_id,
            "description": get_field(line, "description", ""),
            "hsn_code": get_field(line, "hsn_code") or (item.hsn_code if item else None),
            "quantity": get_field(line, "quantity"),
            "unit": get_field(line, "unit", "Pcs"),
            "rate": get_field(line, "rate"),
            "item_gst_rate": item.gst_rate if item else None,
        })
    return out


def _line_rows(model, lines: list[dict]) -> list:
    return [
        model(
            serial_number=idx,
            item_id=line["item_id"],
            description=line["description"],
            hsn_code=line["hsn_code"],
            quantity=line["quantity"],
            unit=line["unit"],
            rate=line["rate"],
            amount=line_amount(line["quantity"], line["rate"]),
        )
        for idx, line in enumerate(lines, start=1)
    ]


def _save_new_items(db: Session, lines: list[dict], gst_rate) -> int:
    """Add descriptions not yet in the catalog (case-insensitive by name)."""
    seen: set[str] = set()
    added = 0
    for line in lines:
        if line["item_id"] is not None:
            continue
        key = line["description"].lower()
        if key in seen:
            continue
        seen.add(key)
        if find_item_by_name(db, line["description"]) is not None:
            continue
        db.add(
            Item(
                name=line["description"],
                hsn_code=line["hsn_code"],
                default_unit=line["unit"],
                default_rate=line["rate"],
                gst_rate=gst_rate,
            )
        )
        added += 1
    return added


def _due_from_terms(invoice_date: date, party: Any) -> Optional[date]:
    days = PAYMENT_TERMS.get(get_field(party, "payment_terms", ""))
    if days is None:
        return None
    return invoice_date + timedelta(days=days)


def _tax_columns(breakdown: TaxBreakdown) -> dict:
    return {
        "amount_before_tax": breakdown.amount_before_tax,
        "amount_in_words": breakdown.amount_in_words,
        **storage_tax_fields(breakdown),
    }


def _commit_numbered(
    db: Session,
    *,
    document: str,
    allocation: NumberAllocation,
    counter: str,
    number_exists: Callable[[Session, int], bool],
) -> None:
    """
    Flush the pending document, move the counter and commit.

    A unique-constraint failure on the number is reported as
    DuplicateNumberError; the rollback leaves no row and no counter change.
    """
    number = allocation.assigned_number
    try:
        db.flush()
        if allocation.advances_counter:
            if advance_counter(db, counter, allocation.next_counter):
                log.info("%s counter advanced to %s", counter, allocation.next_counter)
        db.commit()
    except IntegrityError:
        db.rollback()
        if number is not None and number_exists(db, number):
            log.warning(
                "Duplicate %s number rejected",
                document.lower(),
                extra={"document": document, "number": number},
            )
            raise DuplicateNumberError(document, number)
        raise
    except Exception:
        db.rollback()
        raise


# --------------------------------------------------
# tax preview
# --------------------------------------------------

def preview_tax(
    db: Session,
    items: list,
    packaging_charges=0,
    supplier_state_code: Optional[str] = None,
    counterparty_state_code: Optional[str] = None,
    gst_rate=None,
) -> TaxBreakdown:
    """Totals for a form that has not been saved yet. No writes."""
    company = get_company_settings(db)
    lines = validate_line_items(_with_catalog_rates(db, items), require_any=False)
    supplier = supplier_state_code or company.state_code
    counterparty = counterparty_state_code or supplier
    rate = gst_rate if gst_rate is not None else resolve_gst_rate(lines, company.default_gst_rate)
    return compute_tax(lines, packaging_charges, supplier, counterparty, rate)


# --------------------------------------------------
# invoices
# --------------------------------------------------

def create_invoice(db: Session, data: Any, today: Optional[date] = None) -> Invoice:
    company = get_company_settings(db)

    party = None
    party_id = get_field(data, "party_id")
    if party_id is not None:
        party = get_party(db, party_id)
        if party is None:
            raise NotFoundError(f"Party {party_id} not found", details={"party_id": party_id})

    # snapshot: explicit form values win over the party master
    billed_to_name = require_party_name(get_field(data, "billed_to_name") or get_field(party, "name"))
    party_gstin = normalize_gstin(get_field(data, "party_gstin") or get_field(party, "gstin"))
    billed_to_state_code = get_field(data, "billed_to_state_code") or get_field(party, "state_code")

    lines = validate_line_items(_with_catalog_rates(db, get_field(data, "items", [])))
    gst_rate = resolve_gst_rate(lines, company.default_gst_rate)
    supply_state_code = resolve_supply_state_code(
        get_field(data, "place_of_supply_state_code"),
        billed_to_state_code,
        company.state_code,
    )
    breakdown = compute_tax(
        lines,
        get_field(data, "packaging_charges", 0),
        company.state_code,
        supply_state_code,
        gst_rate,
    )

    is_draft = bool(get_field(data, "is_draft", False))
    allocation = allocate_number(company.next_invoice_number, is_draft, get_field(data, "invoice_number"))

    invoice_date = as_date(get_field(data, "invoice_date")) or today or date.today()
    due_date = as_date(get_field(data, "due_date")) or _due_from_terms(invoice_date, party)

    inv = Invoice(
        invoice_number=allocation.assigned_number,
        is_draft=is_draft,
        invoice_date=invoice_date,
        due_date=due_date,
        party_id=party_id,
        party_gstin=party_gstin,
        billed_to_name=billed_to_name,
        billed_to_address=get_field(data, "billed_to_address") or get_field(party, "address"),
        billed_to_state=get_field(data, "billed_to_state") or get_field(party, "state"),
        billed_to_state_code=billed_to_state_code,
        shipped_to_name=get_field(data, "shipped_to_name"),
        shipped_to_address=get_field(data, "shipped_to_address"),
        shipped_to_state=get_field(data, "shipped_to_state"),
        shipped_to_state_code=get_field(data, "shipped_to_state_code"),
        shipped_to_phone=get_field(data, "shipped_to_phone"),
        transport_mode=get_field(data, "transport_mode"),
        vehicle_number=get_field(data, "vehicle_number"),
        gr_rr_number=get_field(data, "gr_rr_number"),
        place_of_supply=get_field(data, "place_of_supply"),
        place_of_supply_state_code=get_field(data, "place_of_supply_state_code"),
        total_packages=get_field(data, "total_packages"),
        packaging_charges=breakdown.packaging_charges,
        sub_total=breakdown.sub_total,
        grand_total=breakdown.grand_total,
        reverse_charge=bool(get_field(data, "reverse_charge", False)),
        notes=get_field(data, "notes"),
        **_tax_columns(breakdown),
    )
    inv.items = _line_rows(InvoiceItem, lines)
    db.add(inv)

    if get_field(data, "save_new_items", False):
        _save_new_items(db, lines, company.default_gst_rate)

    _commit_numbered(
        db,
        document=INVOICE,
        allocation=allocation,
        counter="next_invoice_number",
        number_exists=invoice_number_exists,
    )
    db.refresh(inv)
    log.info(
        "Invoice saved",
        extra={"invoice_id": inv.id, "invoice_number": inv.invoice_number, "is_draft": inv.is_draft},
    )
    return inv


def finalize_draft(db: Session, invoice_id: int, candidate_number: Optional[int] = None) -> Invoice:
    """Give a draft its number. Totals were fixed when the draft was saved."""
    inv = get_invoice(db, invoice_id)
    if inv is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    if not inv.is_draft:
        raise ValidationError(f"Invoice #{inv.invoice_number} is already final")

    company = get_company_settings(db)
    allocation = allocate_number(company.next_invoice_number, False, candidate_number)
    inv.invoice_number = allocation.assigned_number
    inv.is_draft = False

    _commit_numbered(
        db,
        document=INVOICE,
        allocation=allocation,
        counter="next_invoice_number",
        number_exists=invoice_number_exists,
    )
    db.refresh(inv)
    log.info("Draft finalized", extra={"invoice_id": inv.id, "invoice_number": inv.invoice_number})
    return inv


def duplicate_invoice(db: Session, invoice_id: int, today: Optional[date] = None) -> Invoice:
    """
    Copy an invoice and its lines under the next counter number, dated
    today. The due date keeps the source's payment term.
    """
    src = get_invoice(db, invoice_id)
    if src is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")

    today = today or date.today()
    company = get_company_settings(db)
    allocation = allocate_number(company.next_invoice_number, False)

    due_date = None
    if src.due_date is not None:
        due_date = today + (src.due_date - src.invoice_date)

    copy = Invoice(
        invoice_number=allocation.assigned_number,
        is_draft=False,
        invoice_date=today,
        due_date=due_date,
        **{name: getattr(src, name) for name in _INVOICE_COPY_FIELDS},
    )
    copy.items = [
        InvoiceItem(
            serial_number=it.serial_number,
            item_id=it.item_id,
            description=it.description,
            hsn_code=it.hsn_code,
            quantity=it.quantity,
            unit=it.unit,
            rate=it.rate,
            amount=it.amount,
        )
        for it in src.items
    ]
    db.add(copy)

    _commit_numbered(
        db,
        document=INVOICE,
        allocation=allocation,
        counter="next_invoice_number",
        number_exists=invoice_number_exists,
    )
    db.refresh(copy)
    log.info("Invoice duplicated", extra={"source_invoice_id": src.id, "invoice_number": copy.invoice_number})
    return copy


def delete_invoice(db: Session, invoice_id: int) -> None:
    inv = get_invoice(db, invoice_id)
    if inv is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    invoice_rows.delete_invoice(db, inv)
    log.info("Invoice deleted", extra={"invoice_id": invoice_id})


# --------------------------------------------------
# payments
# --------------------------------------------------

def add_payment(db: Session, invoice_id: int, data: Any) -> Payment:
    inv = get_invoice(db, invoice_id)
    if inv is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    if inv.is_draft:
        raise ValidationError("Payments cannot be recorded against a draft invoice")

    payment = Payment(
        invoice_id=inv.id,
        payment_date=as_date(get_field(data, "payment_date")),
        amount=get_field(data, "amount"),
        payment_mode=get_field(data, "payment_mode", "Cash"),
        reference_number=get_field(data, "reference_number"),
        notes=get_field(data, "notes"),
    )
    db.add(payment)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(payment)
    log.info("Payment recorded", extra={"invoice_id": inv.id, "payment_id": payment.id})
    return payment


def delete_payment(db: Session, payment_id: int) -> None:
    payment = get_payment(db, payment_id)
    if payment is None:
        raise NotFoundError(f"Payment {payment_id} not found")
    invoice_rows.delete_payment(db, payment)


# --------------------------------------------------
# credit notes
# --------------------------------------------------

def create_credit_note(db: Session, data: Any, today: Optional[date] = None) -> CreditNote:
    company = get_company_settings(db)

    party = None
    party_id = get_field(data, "party_id")
    if party_id is not None:
        party = get_party(db, party_id)
        if party is None:
            raise NotFoundError(f"Party {party_id} not found", details={"party_id": party_id})

    original = None
    original_invoice_id = get_field(data, "original_invoice_id")
    if original_invoice_id is not None:
        original = get_invoice(db, original_invoice_id)
        if original is None:
            raise NotFoundError(f"Invoice {original_invoice_id} not found")

    party_name = require_party_name(
        get_field(data, "party_name") or get_field(party, "name") or get_field(original, "billed_to_name")
    )
    reason = require_reason(get_field(data, "reason"))
    party_gstin = normalize_gstin(
        get_field(data, "party_gstin") or get_field(party, "gstin") or get_field(original, "party_gstin")
    )
    party_state_code = (
        get_field(data, "party_state_code")
        or get_field(party, "state_code")
        or get_field(original, "billed_to_state_code")
    )

    lines = validate_line_items(_with_catalog_rates(db, get_field(data, "items", [])))
    gst_rate = resolve_gst_rate(lines, company.default_gst_rate)
    breakdown = compute_tax(lines, 0, company.state_code, party_state_code or company.state_code, gst_rate)

    allocation = allocate_number(company.next_credit_note_number, False, get_field(data, "credit_note_number"))

    cn = CreditNote(
        credit_note_number=allocation.assigned_number,
        credit_note_date=as_date(get_field(data, "credit_note_date")) or today or date.today(),
        original_invoice_id=original_invoice_id,
        party_id=party_id if party_id is not None else get_field(original, "party_id"),
        party_gstin=party_gstin,
        party_name=party_name,
        party_address=get_field(data, "party_address") or get_field(party, "address") or get_field(original, "billed_to_address"),
        party_state=get_field(data, "party_state") or get_field(party, "state") or get_field(original, "billed_to_state"),
        party_state_code=party_state_code,
        reason=reason,
        total_amount=breakdown.grand_total,
        notes=get_field(data, "notes"),
        **_tax_columns(breakdown),
    )
    cn.items = _line_rows(CreditNoteItem, lines)
    db.add(cn)

    _commit_numbered(
        db,
        document=CREDIT_NOTE,
        allocation=allocation,
        counter="next_credit_note_number",
        number_exists=credit_note_number_exists,
    )
    db.refresh(cn)
    log.info("Credit note saved", extra={"credit_note_id": cn.id, "credit_note_number": cn.credit_note_number})
    return cn


def delete_credit_note(db: Session, credit_note_id: int) -> None:
    cn = get_credit_note(db, credit_note_id)
    if cn is None:
        raise NotFoundError(f"Credit note {credit_note_id} not found")
    credit_note_rows.delete_credit_note(db, cn)
