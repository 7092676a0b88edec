from datetime import date

from sqlalchemy.orm import Session, selectinload

from models.credit_note import CreditNote


def get_credit_note(db: Session, credit_note_id: int) -> CreditNote | None:
    return (
        db.query(CreditNote)
        .options(selectinload(CreditNote.items))
        .filter(CreditNote.id == credit_note_id)
        .first()
    )


def credit_note_number_exists(db: Session, number: int) -> bool:
    return db.query(CreditNote.id).filter(CreditNote.credit_note_number == number).first() is not None


def list_credit_notes(
    db: Session,
    *,
    party_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = 500,
) -> list[CreditNote]:
    q = db.query(CreditNote).options(selectinload(CreditNote.items))
    if party_id is not None:
        q = q.filter(CreditNote.party_id == party_id)
    if date_from is not None:
        q = q.filter(CreditNote.credit_note_date >= date_from)
    if date_to is not None:
        q = q.filter(CreditNote.credit_note_date <= date_to)
    return q.order_by(CreditNote.credit_note_date.desc(), CreditNote.id.desc()).limit(limit).all()


def delete_credit_note(db: Session, row: CreditNote) -> None:
    db.delete(row)
    db.commit()
