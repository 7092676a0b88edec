"""
Party ledger, payment status and receivables aging.

All functions are pure: they take invoice / payment records (ORM rows,
dicts or any object exposing the same field names) and return new
values. Nothing here reads the clock; callers pass `today`.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional

from services.records import as_date, get_field
from services.tax_engine import ZERO, as_decimal, round_money


class PaymentStatus(str, Enum):
    PAID = "Paid"
    PARTIAL = "Partial"
    UNPAID = "Unpaid"
    OVERDUE = "Overdue"


@dataclass
class LedgerEntry:
    date: date
    type: str  # "invoice" | "payment"
    reference: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    id: Any


@dataclass
class AgedInvoice:
    invoice_id: Any
    invoice_number: Optional[int]
    party_id: Any
    billed_to_name: Optional[str]
    invoice_date: date
    due_date: Optional[date]
    grand_total: Decimal
    paid: Decimal
    due: Decimal
    days_overdue: int


@dataclass
class AgingBucket:
    key: str
    label: str
    total: Decimal = ZERO
    invoices: list[AgedInvoice] = field(default_factory=list)


@dataclass
class AgingReport:
    buckets: list[AgingBucket]
    grand_total: Decimal

    def bucket(self, key: str) -> AgingBucket:
        return next(b for b in self.buckets if b.key == key)


@dataclass
class PartyOutstanding:
    party_id: Any
    name: str
    total: Decimal
    paid: Decimal
    due: Decimal
    invoice_count: int


# (key, label, max days overdue inclusive); last bucket is open ended
AGING_BUCKETS = [
    ("current", "Current", 0),
    ("days1_30", "1-30 Days", 30),
    ("days31_60", "31-60 Days", 60),
    ("days61_90", "61-90 Days", 90),
    ("days90plus", "90+ Days", None),
]


def _invoice_ref(invoice: Any) -> str:
    number = get_field(invoice, "invoice_number")
    return f"INV-{number}" if number is not None else "DRAFT"


def paid_by_invoice(payments: Iterable[Any]) -> dict[Any, Decimal]:
    totals: dict[Any, Decimal] = defaultdict(lambda: ZERO)
    for p in payments:
        totals[get_field(p, "invoice_id")] += as_decimal(get_field(p, "amount"), "amount")
    return dict(totals)


def build_ledger(invoices: Iterable[Any], payments: Iterable[Any]) -> list[LedgerEntry]:
    """
    Chronological statement for one party: invoices are debits, payments
    credits. Same-date entries keep insertion order (invoices first, then
    payments, each in the order given). `balance` includes the entry itself;
    > 0 means the party owes money.
    """
    invoices = list(invoices)
    by_id = {get_field(inv, "id"): inv for inv in invoices}

    entries: list[LedgerEntry] = []
    for inv in invoices:
        entries.append(
            LedgerEntry(
                date=as_date(get_field(inv, "invoice_date")),
                type="invoice",
                reference=_invoice_ref(inv),
                description=f"Invoice #{get_field(inv, 'invoice_number', '-')}",
                debit=round_money(get_field(inv, "grand_total", 0)),
                credit=ZERO,
                balance=ZERO,
                id=get_field(inv, "id"),
            )
        )

    for pmt in payments:
        mode = get_field(pmt, "payment_mode", "Cash")
        owner = by_id.get(get_field(pmt, "invoice_id"))
        owner_ref = _invoice_ref(owner) if owner is not None else "INV-?"
        entries.append(
            LedgerEntry(
                date=as_date(get_field(pmt, "payment_date")),
                type="payment",
                reference=get_field(pmt, "reference_number") or mode,
                description=f"Payment for {owner_ref} ({mode})",
                debit=ZERO,
                credit=round_money(get_field(pmt, "amount", 0)),
                balance=ZERO,
                id=get_field(pmt, "id"),
            )
        )

    # sorted() is stable, so insertion order is the tiebreak
    entries = sorted(entries, key=lambda e: e.date)

    running = ZERO
    for entry in entries:
        running += entry.debit - entry.credit
        entry.balance = running

    return entries


def payment_status(invoice: Any, paid_amount, today: date) -> PaymentStatus:
    """
    Paid when fully covered; otherwise Overdue if a due date has passed,
    else Partial / Unpaid. Overdue never overrides Paid.
    """
    paid = as_decimal(paid_amount, "paid_amount")
    grand_total = as_decimal(get_field(invoice, "grand_total", 0), "grand_total")
    if paid >= grand_total:
        return PaymentStatus.PAID

    due_date = as_date(get_field(invoice, "due_date"))
    if due_date is not None and due_date < today:
        return PaymentStatus.OVERDUE

    if paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def _bucket_key(days_overdue: int) -> str:
    for key, _label, max_days in AGING_BUCKETS:
        if max_days is None or days_overdue <= max_days:
            return key
    return AGING_BUCKETS[-1][0]


def build_aging(invoices: Iterable[Any], payments: Iterable[Any], today: date) -> AgingReport:
    """
    Outstanding receivables by how late they are.

    days overdue = today - (due_date or invoice_date). Fully paid invoices
    are left out. Each bucket lists its invoices most overdue first.
    """
    paid = paid_by_invoice(payments)
    buckets = {key: AgingBucket(key=key, label=label) for key, label, _ in AGING_BUCKETS}

    for inv in invoices:
        grand_total = round_money(get_field(inv, "grand_total", 0))
        inv_paid = paid.get(get_field(inv, "id"), ZERO)
        due = grand_total - inv_paid
        if due <= 0:
            continue

        invoice_date = as_date(get_field(inv, "invoice_date"))
        due_date = as_date(get_field(inv, "due_date"))
        reference = due_date or invoice_date
        days_overdue = (today - reference).days

        bucket = buckets[_bucket_key(days_overdue)]
        bucket.invoices.append(
            AgedInvoice(
                invoice_id=get_field(inv, "id"),
                invoice_number=get_field(inv, "invoice_number"),
                party_id=get_field(inv, "party_id"),
                billed_to_name=get_field(inv, "billed_to_name"),
                invoice_date=invoice_date,
                due_date=due_date,
                grand_total=grand_total,
                paid=inv_paid,
                due=due,
                days_overdue=days_overdue,
            )
        )
        bucket.total += due

    ordered = [buckets[key] for key, _, _ in AGING_BUCKETS]
    for bucket in ordered:
        bucket.invoices.sort(key=lambda a: a.days_overdue, reverse=True)

    return AgingReport(buckets=ordered, grand_total=sum((b.total for b in ordered), ZERO))


def outstanding_by_party(invoices: Iterable[Any], payments: Iterable[Any], party_names: Optional[dict] = None) -> list[PartyOutstanding]:
    """
    Receivables per party, largest due first. Invoices without a party are
    skipped; parties with nothing due are dropped.
    """
    paid = paid_by_invoice(payments)
    party_names = party_names or {}
    rows: dict[Any, PartyOutstanding] = {}

    for inv in invoices:
        party_id = get_field(inv, "party_id")
        if party_id is None:
            continue

        row = rows.get(party_id)
        if row is None:
            name = party_names.get(party_id) or get_field(inv, "billed_to_name") or "Unknown"
            row = rows[party_id] = PartyOutstanding(
                party_id=party_id, name=name, total=ZERO, paid=ZERO, due=ZERO, invoice_count=0
            )

        grand_total = round_money(get_field(inv, "grand_total", 0))
        inv_paid = paid.get(get_field(inv, "id"), ZERO)
        row.total += grand_total
        row.paid += inv_paid
        row.due += max(ZERO, grand_total - inv_paid)
        row.invoice_count += 1

    out = [r for r in rows.values() if r.due > 0]
    out.sort(key=lambda r: r.due, reverse=True)
    return out


def party_summary(invoices: Iterable[Any], payments: Iterable[Any]) -> dict:
    invoices = list(invoices)
    payments = list(payments)
    total_amount = sum((round_money(get_field(i, "grand_total", 0)) for i in invoices), ZERO)
    total_paid = sum((round_money(get_field(p, "amount", 0)) for p in payments), ZERO)
    return {
        "total_invoices": len(invoices),
        "total_amount": total_amount,
        "total_paid": total_paid,
        "total_due": total_amount - total_paid,
    }
