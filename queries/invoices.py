from datetime import date

from sqlalchemy.orm import Session, selectinload

from models.invoice import Invoice, Payment


def get_invoice(db: Session, invoice_id: int) -> Invoice | None:
    return (
        db.query(Invoice)
        .options(selectinload(Invoice.items), selectinload(Invoice.payments))
        .filter(Invoice.id == invoice_id)
        .first()
    )


def invoice_number_exists(db: Session, number: int) -> bool:
    return db.query(Invoice.id).filter(Invoice.invoice_number == number).first() is not None


def list_invoices(
    db: Session,
    *,
    party_id: int | None = None,
    is_draft: bool | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = 500,
) -> list[Invoice]:
    q = db.query(Invoice).options(selectinload(Invoice.items), selectinload(Invoice.payments))
    if party_id is not None:
        q = q.filter(Invoice.party_id == party_id)
    if is_draft is not None:
        q = q.filter(Invoice.is_draft == is_draft)
    if date_from is not None:
        q = q.filter(Invoice.invoice_date >= date_from)
    if date_to is not None:
        q = q.filter(Invoice.invoice_date <= date_to)
    return q.order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).limit(limit).all()


def count_invoices(db: Session, is_draft: bool | None = None) -> int:
    q = db.query(Invoice)
    if is_draft is not None:
        q = q.filter(Invoice.is_draft == is_draft)
    return q.count()


def list_final_invoices(db: Session, party_id: int | None = None) -> list[Invoice]:
    """Issued (numbered) invoices, oldest first; drafts are not receivables."""
    q = db.query(Invoice).filter(Invoice.is_draft.is_(False))
    if party_id is not None:
        q = q.filter(Invoice.party_id == party_id)
    return q.order_by(Invoice.invoice_date.asc(), Invoice.id.asc()).all()


def delete_invoice(db: Session, row: Invoice) -> None:
    # line items and payments go with it (cascade)
    db.delete(row)
    db.commit()


# --------------------------------------------------
# Payments
# --------------------------------------------------

def get_payment(db: Session, payment_id: int) -> Payment | None:
    return db.query(Payment).filter(Payment.id == payment_id).first()


def list_payments(db: Session, invoice_ids: list[int] | None = None) -> list[Payment]:
    q = db.query(Payment)
    if invoice_ids is not None:
        if not invoice_ids:
            return []
        q = q.filter(Payment.invoice_id.in_(invoice_ids))
    return q.order_by(Payment.payment_date.asc(), Payment.id.asc()).all()


def delete_payment(db: Session, row: Payment) -> None:
    db.delete(row)
    db.commit()
