import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from core.constants import CREDIT_NOTE_REASONS
from core.errors import ComputationError, ValidationError
from services.records import get_field
from services.tax_engine import as_decimal, round_money

GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$")

# storage scale of line quantities (rates are money, 2 dp)
QUANTITY_STEP = Decimal("0.001")


def validate_line_items(lines: Iterable[Any], require_any: bool = True) -> list[dict]:
    """
    Normalize the lines of a document before tax computation.

    Rows without a description, quantity or rate are treated as empty rows
    left in the form and dropped. Numbers that are not finite or are
    negative are rejected outright. Quantity is rounded half-up to 3 dp and
    rate to 2 dp, the precision they are stored at, so a line amount is
    always computed from the stored values. Returns plain dicts with
    Decimal quantity / rate.
    """
    valid: list[dict] = []
    for idx, line in enumerate(lines, start=1):
        description = (get_field(line, "description", "") or "").strip()
        quantity = as_decimal(get_field(line, "quantity"), f"line {idx} quantity")
        rate = as_decimal(get_field(line, "rate"), f"line {idx} rate")

        if quantity < 0 or rate < 0:
            raise ComputationError(
                f"Line {idx}: quantity and rate must not be negative",
                details={"line": idx, "quantity": str(quantity), "rate": str(rate)},
            )

        quantity = quantity.quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)
        rate = round_money(rate)

        if not description or quantity == 0 or rate == 0:
            continue

        item_gst_rate = get_field(line, "item_gst_rate")
        valid.append({
            "item_id": get_field(line, "item_id"),
            "description": description,
            "hsn_code": get_field(line, "hsn_code"),
            "quantity": quantity,
            "unit": get_field(line, "unit", "Pcs"),
            "rate": rate,
            "item_gst_rate": as_decimal(item_gst_rate, "item_gst_rate") if item_gst_rate is not None else None,
        })

    if require_any and not valid:
        raise ValidationError("Please add at least one item")
    return valid


def require_party_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter the party name")
    return name


def require_reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Please select a reason for the credit note")
    if reason not in CREDIT_NOTE_REASONS:
        raise ValidationError(
            f"Unknown credit note reason: {reason}",
            details={"allowed": list(CREDIT_NOTE_REASONS)},
        )
    return reason


def is_valid_gstin(gstin: Optional[str]) -> bool:
    return bool(gstin) and GSTIN_PATTERN.match(gstin.strip().upper()) is not None


def normalize_gstin(gstin: Optional[str]) -> Optional[str]:
    """Upper-cased GSTIN, None when empty; raises on a malformed one."""
    if gstin is None or not gstin.strip():
        return None
    gstin = gstin.strip().upper()
    if not GSTIN_PATTERN.match(gstin):
        raise ValidationError("Invalid GSTIN format", details={"gstin": gstin})
    return gstin


def state_code_from_gstin(gstin: str) -> str:
    """First two digits of a GSTIN are the registering state's code."""
    return gstin.strip()[:2]
