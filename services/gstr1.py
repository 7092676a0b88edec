"""
GSTR-1 (outward supplies) preparation.

Splits a period's invoices into B2B / B2CL / B2CS, builds the filing JSON
with the portal's field names (ctin, inum, idt, val, pos, rchrg, txval,
rt, camt, samt, iamt, ...) and a flat row set for CSV export.
"""

import csv
import io
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional

from core.config import settings
from services.records import as_date, get_field
from services.tax_engine import ZERO, as_decimal, round_money


@dataclass(frozen=True)
class Gstr1Policy:
    """Filing thresholds; GST rules change, so these come from settings."""

    b2cl_threshold: Decimal = Decimal("250000")
    default_rate: Decimal = Decimal("18")

    @classmethod
    def from_settings(cls) -> "Gstr1Policy":
        return cls(
            b2cl_threshold=Decimal(settings.GSTR1_B2CL_THRESHOLD),
            default_rate=Decimal(settings.GSTR1_DEFAULT_RATE),
        )


@dataclass
class Gstr1Classification:
    b2b: list = field(default_factory=list)
    b2cs: list = field(default_factory=list)
    b2cl: list = field(default_factory=list)


def gstr_date(value: Any) -> str:
    """dd-mm-yyyy, the only date format the filing schema accepts."""
    return as_date(value).strftime("%d-%m-%Y")


def filing_period(month: int, year: int) -> str:
    """MMYYYY"""
    return f"{month:02d}{year}"


def filter_period(docs: Iterable[Any], month: int, year: int, date_field: str = "invoice_date") -> list:
    out = []
    for doc in docs:
        d = as_date(get_field(doc, date_field))
        if d is not None and d.month == month and d.year == year:
            out.append(doc)
    return out


def _num(value: Any) -> float:
    # JSON payload carries plain numbers
    return float(round_money(value))


def _rate_num(value: Decimal) -> float | int:
    return int(value) if value == value.to_integral_value() else float(value)


def effective_rate(doc: Any, policy: Gstr1Policy) -> Decimal:
    """cgst_rate * 2 when CGST applies, else igst_rate, else the policy default."""
    cgst_rate = as_decimal(get_field(doc, "cgst_rate", 0))
    if cgst_rate:
        return cgst_rate * 2
    igst_rate = as_decimal(get_field(doc, "igst_rate", 0))
    if igst_rate:
        return igst_rate
    return policy.default_rate


def _pos(doc: Any, company_state_code: str) -> str:
    return get_field(doc, "place_of_supply_state_code") or company_state_code


def _is_filed(inv: Any) -> bool:
    # drafts carry no number and are not reported
    return not get_field(inv, "is_draft", False) and get_field(inv, "invoice_number") is not None


def classify(invoices: Iterable[Any], company_state_code: str, policy: Optional[Gstr1Policy] = None) -> Gstr1Classification:
    """
    - party GSTIN present            -> b2b
    - no GSTIN, inter-state, > limit -> b2cl
    - everything else                -> b2cs
    """
    policy = policy or Gstr1Policy.from_settings()
    result = Gstr1Classification()

    for inv in invoices:
        if not _is_filed(inv):
            continue

        if get_field(inv, "party_gstin"):
            result.b2b.append(inv)
            continue

        pos = get_field(inv, "place_of_supply_state_code")
        is_inter_state = bool(pos) and pos != company_state_code
        if is_inter_state and as_decimal(get_field(inv, "grand_total", 0)) > policy.b2cl_threshold:
            result.b2cl.append(inv)
        else:
            result.b2cs.append(inv)

    return result


def _itm_det(taxable, rate: Decimal, doc: Any) -> dict:
    det: dict[str, Any] = {"txval": _num(taxable), "rt": _rate_num(rate)}
    cgst_amount = get_field(doc, "cgst_amount")
    igst_amount = get_field(doc, "igst_amount")
    if cgst_amount:
        det["camt"] = _num(cgst_amount)
        det["samt"] = _num(get_field(doc, "sgst_amount", 0))
    if igst_amount:
        det["iamt"] = _num(igst_amount)
    return det


def _group_by_gstin(docs: Iterable[Any]) -> "OrderedDict[str, list]":
    groups: "OrderedDict[str, list]" = OrderedDict()
    for doc in docs:
        groups.setdefault(get_field(doc, "party_gstin"), []).append(doc)
    return groups


def build_b2b(invoices: Iterable[Any], company_state_code: str, policy: Gstr1Policy) -> list[dict]:
    b2b = []
    for gstin, invs in _group_by_gstin(invoices).items():
        b2b.append({
            "ctin": gstin,
            "inv": [
                {
                    "inum": str(get_field(inv, "invoice_number")),
                    "idt": gstr_date(get_field(inv, "invoice_date")),
                    "val": _num(get_field(inv, "grand_total", 0)),
                    "pos": _pos(inv, company_state_code),
                    "rchrg": "Y" if get_field(inv, "reverse_charge", False) else "N",
                    "inv_typ": "R",  # Regular
                    "itms": [{"num": 1, "itm_det": _itm_det(get_field(inv, "sub_total", 0), effective_rate(inv, policy), inv)}],
                }
                for inv in invs
            ],
        })
    return b2b


def build_b2cl(invoices: Iterable[Any], company_state_code: str, policy: Gstr1Policy) -> list[dict]:
    by_pos: "OrderedDict[str, list]" = OrderedDict()
    for inv in invoices:
        by_pos.setdefault(_pos(inv, company_state_code), []).append(inv)

    return [
        {
            "pos": pos,
            "inv": [
                {
                    "inum": str(get_field(inv, "invoice_number")),
                    "idt": gstr_date(get_field(inv, "invoice_date")),
                    "val": _num(get_field(inv, "grand_total", 0)),
                    "itms": [{"num": 1, "itm_det": _itm_det(get_field(inv, "sub_total", 0), effective_rate(inv, policy), inv)}],
                }
                for inv in invs
            ],
        }
        for pos, invs in by_pos.items()
    ]


def build_b2cs(invoices: Iterable[Any], company_state_code: str, policy: Gstr1Policy) -> list[dict]:
    """Aggregated by (place of supply, rate, intra/inter)."""
    groups: "OrderedDict[tuple, dict]" = OrderedDict()

    for inv in invoices:
        pos = _pos(inv, company_state_code)
        is_intra = pos == company_state_code
        rate = effective_rate(inv, policy)
        key = (pos, rate, is_intra)

        g = groups.get(key)
        if g is None:
            g = groups[key] = {"txval": ZERO, "camt": ZERO, "samt": ZERO, "iamt": ZERO}
        g["txval"] += as_decimal(get_field(inv, "sub_total", 0))
        g["camt"] += as_decimal(get_field(inv, "cgst_amount", 0))
        g["samt"] += as_decimal(get_field(inv, "sgst_amount", 0))
        g["iamt"] += as_decimal(get_field(inv, "igst_amount", 0))

    out = []
    for (pos, rate, is_intra), g in groups.items():
        row: dict[str, Any] = {
            "sply_ty": "INTRA" if is_intra else "INTER",
            "pos": pos,
            "typ": "OE",  # not through e-commerce operator
            "txval": _num(g["txval"]),
            "rt": _rate_num(rate),
        }
        if is_intra:
            row["camt"] = _num(g["camt"])
            row["samt"] = _num(g["samt"])
        else:
            row["iamt"] = _num(g["iamt"])
        out.append(row)
    return out


def build_cdnr(credit_notes: Iterable[Any], company_state_code: str, policy: Gstr1Policy) -> list[dict]:
    """Credit notes issued to registered parties, one group per GSTIN."""
    registered = [cn for cn in credit_notes if get_field(cn, "party_gstin")]
    return [
        {
            "ctin": gstin,
            "nt": [
                {
                    "ntty": "C",
                    "nt_num": f"CN-{get_field(cn, 'credit_note_number')}",
                    "nt_dt": gstr_date(get_field(cn, "credit_note_date")),
                    "val": _num(get_field(cn, "total_amount", 0)),
                    "pos": get_field(cn, "party_state_code") or company_state_code,
                    "rchrg": "N",
                    "inv_typ": "R",
                    "itms": [{"num": 1, "itm_det": _itm_det(get_field(cn, "amount_before_tax", 0), effective_rate(cn, policy), cn)}],
                }
                for cn in notes
            ],
        }
        for gstin, notes in _group_by_gstin(registered).items()
    ]


def gstr1_summary(classification: Gstr1Classification, credit_notes: Iterable[Any]) -> dict:
    credit_notes = list(credit_notes)

    def total(docs, name="grand_total"):
        return sum((round_money(get_field(d, name, 0)) for d in docs), ZERO)

    all_invoices = classification.b2b + classification.b2cs + classification.b2cl
    total_tax = sum(
        (
            round_money(get_field(inv, "cgst_amount", 0))
            + round_money(get_field(inv, "sgst_amount", 0))
            + round_money(get_field(inv, "igst_amount", 0))
            for inv in all_invoices
        ),
        ZERO,
    )

    b2b_total = total(classification.b2b)
    b2cs_total = total(classification.b2cs)
    b2cl_total = total(classification.b2cl)
    return {
        "total_invoices": len(all_invoices),
        "b2b_count": len(classification.b2b),
        "b2b_total": b2b_total,
        "b2cs_count": len(classification.b2cs),
        "b2cs_total": b2cs_total,
        "b2cl_count": len(classification.b2cl),
        "b2cl_total": b2cl_total,
        "credit_notes_count": len(credit_notes),
        "credit_notes_total": total(credit_notes, "total_amount"),
        "total_tax": total_tax,
        "grand_total": b2b_total + b2cs_total + b2cl_total,
    }


def build_gstr1_payload(
    invoices: Iterable[Any],
    credit_notes: Iterable[Any],
    *,
    company_gstin: str,
    company_state_code: str,
    month: int,
    year: int,
    policy: Optional[Gstr1Policy] = None,
) -> dict:
    """
    Filing JSON for one period. `invoices` / `credit_notes` should already be
    limited to the period (see filter_period).
    """
    policy = policy or Gstr1Policy.from_settings()
    credit_notes = list(credit_notes)
    classification = classify(invoices, company_state_code, policy)
    summary = gstr1_summary(classification, credit_notes)

    payload: dict[str, Any] = {
        "gstin": company_gstin or "",
        "fp": filing_period(month, year),
        "gt": _num(summary["grand_total"]),
        "cur_gt": _num(summary["grand_total"]),
        "b2b": build_b2b(classification.b2b, company_state_code, policy),
        "b2cl": build_b2cl(classification.b2cl, company_state_code, policy),
        "b2cs": build_b2cs(classification.b2cs, company_state_code, policy),
    }

    cdnr = build_cdnr(credit_notes, company_state_code, policy)
    if cdnr:
        payload["cdnr"] = cdnr

    return payload


CSV_HEADER = [
    "section",
    "document_number",
    "document_date",
    "party_gstin",
    "party_name",
    "place_of_supply",
    "taxable_value",
    "cgst",
    "sgst",
    "igst",
    "total",
]


def _csv_row(section: str, number: str, doc_date: Any, doc: Any, name_field: str, taxable_field: str, total_field: str, pos: Optional[str]) -> dict:
    d = as_date(doc_date)
    return {
        "section": section,
        "document_number": number,
        "document_date": d.isoformat() if d else "",
        "party_gstin": get_field(doc, "party_gstin", ""),
        "party_name": get_field(doc, name_field, ""),
        "place_of_supply": pos or "",
        "taxable_value": round_money(get_field(doc, taxable_field, 0)),
        "cgst": round_money(get_field(doc, "cgst_amount", 0)),
        "sgst": round_money(get_field(doc, "sgst_amount", 0)),
        "igst": round_money(get_field(doc, "igst_amount", 0)),
        "total": round_money(get_field(doc, total_field, 0)),
    }


def build_gstr1_csv_rows(
    invoices: Iterable[Any],
    credit_notes: Iterable[Any],
    company_state_code: str,
    policy: Optional[Gstr1Policy] = None,
) -> list[dict]:
    """One flat row per document, tagged with its GSTR-1 section."""
    policy = policy or Gstr1Policy.from_settings()
    classification = classify(invoices, company_state_code, policy)

    rows = []
    for section, docs in (("B2B", classification.b2b), ("B2CL", classification.b2cl), ("B2CS", classification.b2cs)):
        for inv in docs:
            rows.append(
                _csv_row(
                    section,
                    str(get_field(inv, "invoice_number")),
                    get_field(inv, "invoice_date"),
                    inv,
                    "billed_to_name",
                    "sub_total",
                    "grand_total",
                    get_field(inv, "place_of_supply") or _pos(inv, company_state_code),
                )
            )

    for cn in credit_notes:
        rows.append(
            _csv_row(
                "CDNR" if get_field(cn, "party_gstin") else "CDNUR",
                f"CN-{get_field(cn, 'credit_note_number')}",
                get_field(cn, "credit_note_date"),
                cn,
                "party_name",
                "amount_before_tax",
                "total_amount",
                get_field(cn, "party_state_code") or company_state_code,
            )
        )
    return rows


def render_csv(rows: list[dict]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_HEADER, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue()
