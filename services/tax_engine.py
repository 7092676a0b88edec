from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, Optional

from core.errors import ComputationError
from services.amount_words import words_for
from services.records import get_field

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def as_decimal(value: Any, field: str = "value") -> Decimal:
    """Decimal from str/int/float/Decimal; None -> 0. NaN / infinity are rejected."""
    if value is None or value == "":
        return Decimal("0")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ComputationError(f"{field} is not a number: {value!r}") from e
    if not d.is_finite():
        raise ComputationError(f"{field} must be a finite number", details={field: str(value)})
    return d


def round_money(value) -> Decimal:
    """Round half away from zero to 2 places (the figure printed and filed)."""
    return as_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_amount(quantity, rate) -> Decimal:
    return round_money(as_decimal(quantity, "quantity") * as_decimal(rate, "rate"))


@dataclass(frozen=True)
class TaxLine:
    quantity: Decimal
    rate: Decimal
    item_gst_rate: Optional[Decimal] = None  # catalog item's own rate, if the line references one


@dataclass(frozen=True)
class TaxBreakdown:
    amount_before_tax: Decimal
    packaging_charges: Decimal
    sub_total: Decimal
    gst_rate: Decimal
    is_inter_state: bool
    cgst_rate: Decimal
    cgst_amount: Decimal
    sgst_rate: Decimal
    sgst_amount: Decimal
    igst_rate: Decimal
    igst_amount: Decimal
    grand_total: Decimal
    amount_in_words: str

    def as_dict(self) -> dict:
        return asdict(self)


def _non_negative(value: Any, field: str) -> Decimal:
    d = as_decimal(value, field)
    if d < 0:
        raise ComputationError(f"{field} must not be negative", details={field: str(d)})
    return d


def resolve_gst_rate(line_items: Iterable[Any], default_rate) -> Decimal:
    """
    First line referencing a catalog item with its own gst_rate decides the
    rate for the whole document; otherwise the caller's default.

    Mixed-rate documents are therefore taxed at a single rate (kept for
    compatibility with already issued invoices).
    """
    for line in line_items:
        rate = get_field(line, "item_gst_rate")
        if rate is not None:
            return _non_negative(rate, "item_gst_rate")
    return _non_negative(default_rate, "default_gst_rate")


def resolve_supply_state_code(
    place_of_supply_code: Optional[str],
    billed_to_code: Optional[str],
    company_code: str,
) -> str:
    """Place of supply wins, then the billed-to state, else the company's own state."""
    return place_of_supply_code or billed_to_code or company_code


def compute_tax(
    line_items: Iterable[Any],
    packaging_charges,
    supplier_state_code: str,
    counterparty_state_code: str,
    gst_rate,
) -> TaxBreakdown:
    """
    GST for one document.

    Same state => CGST + SGST at half the rate each, else IGST at the full
    rate. Every monetary step is rounded to 2 places (line amount, each tax
    amount, grand total), not once at the end.

    line_items: objects or dicts with `quantity` and `rate`.
    """
    amount_before_tax = ZERO
    for line in line_items:
        qty = _non_negative(get_field(line, "quantity"), "quantity")
        rate = _non_negative(get_field(line, "rate"), "rate")
        amount_before_tax += line_amount(qty, rate)

    packaging = round_money(_non_negative(packaging_charges, "packaging_charges"))
    gst = _non_negative(gst_rate, "gst_rate")

    sub_total = round_money(amount_before_tax + packaging)

    cgst_rate = sgst_rate = igst_rate = Decimal("0")
    cgst_amount = sgst_amount = igst_amount = ZERO

    is_inter_state = counterparty_state_code != supplier_state_code
    if not is_inter_state:
        cgst_rate = sgst_rate = gst / 2
        cgst_amount = round_money(sub_total * cgst_rate / 100)
        sgst_amount = round_money(sub_total * sgst_rate / 100)
    else:
        igst_rate = gst
        igst_amount = round_money(sub_total * igst_rate / 100)

    grand_total = round_money(sub_total + cgst_amount + sgst_amount + igst_amount)

    return TaxBreakdown(
        amount_before_tax=round_money(amount_before_tax),
        packaging_charges=packaging,
        sub_total=sub_total,
        gst_rate=gst,
        is_inter_state=is_inter_state,
        cgst_rate=cgst_rate,
        cgst_amount=cgst_amount,
        sgst_rate=sgst_rate,
        sgst_amount=sgst_amount,
        igst_rate=igst_rate,
        igst_amount=igst_amount,
        grand_total=grand_total,
        amount_in_words=words_for(grand_total),
    )


def storage_tax_fields(breakdown: TaxBreakdown) -> dict:
    """
    Persisted tax columns: either the CGST+SGST pair, or the IGST pair, or
    everything NULL for a 0% document.
    """
    fields = {
        "cgst_rate": None,
        "cgst_amount": None,
        "sgst_rate": None,
        "sgst_amount": None,
        "igst_rate": None,
        "igst_amount": None,
    }
    if breakdown.gst_rate == 0:
        return fields

    if breakdown.is_inter_state:
        fields["igst_rate"] = breakdown.igst_rate
        fields["igst_amount"] = breakdown.igst_amount
    else:
        fields["cgst_rate"] = breakdown.cgst_rate
        fields["cgst_amount"] = breakdown.cgst_amount
        fields["sgst_rate"] = breakdown.sgst_rate
        fields["sgst_amount"] = breakdown.sgst_amount
    return fields
