from sqlalchemy import update
from sqlalchemy.orm import Session

from core.config import settings
from models.company_settings import COMPANY_SETTINGS_ID, CompanySettings

COUNTER_COLUMNS = ("next_invoice_number", "next_credit_note_number")


def get_company_settings(db: Session) -> CompanySettings:
    row = db.query(CompanySettings).filter(CompanySettings.id == COMPANY_SETTINGS_ID).first()
    if row:
        return row

    row = CompanySettings(
        id=COMPANY_SETTINGS_ID,
        company_name="",
        state_code=settings.COMPANY_STATE_CODE,
        default_gst_rate=settings.DEFAULT_GST_RATE,
        next_invoice_number=1,
        next_credit_note_number=1,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_company_settings(db: Session, values: dict) -> CompanySettings:
    row = get_company_settings(db)
    for key, value in values.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def advance_counter(db: Session, counter: str, next_value: int) -> bool:
    """
    Move a document counter forward to next_value, never backwards.

    Conditional UPDATE so that two writers racing on the same counter
    cannot lower it. Does not commit: it belongs to the caller's unit of
    work (the document insert). Returns True if the row changed.
    """
    if counter not in COUNTER_COLUMNS:
        raise ValueError(f"unknown counter: {counter}")

    column = getattr(CompanySettings, counter)
    result = db.execute(
        update(CompanySettings)
        .where(CompanySettings.id == COMPANY_SETTINGS_ID, column < next_value)
        .values(**{counter: next_value})
    )
    return result.rowcount > 0
