from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime
from sqlalchemy.sql import func

from models.base import Base


COMPANY_SETTINGS_ID = 1


class CompanySettings(Base):
    """Singleton row (id=1): issuing company + next document counters."""

    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, default=COMPANY_SETTINGS_ID)
    company_name = Column(String(255), nullable=False, default="")
    gstin = Column(String(15), nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String(32), nullable=True)
    email = Column(String(255), nullable=True)
    state = Column(String(64), nullable=True)
    state_code = Column(String(2), nullable=False, default="07")

    bank_name = Column(String(255), nullable=True)
    account_number = Column(String(64), nullable=True)
    ifsc_code = Column(String(16), nullable=True)
    default_terms = Column(Text, nullable=True)

    next_invoice_number = Column(Integer, nullable=False, default=1)
    next_credit_note_number = Column(Integer, nullable=False, default=1)
    default_gst_rate = Column(Numeric(5, 2), nullable=False, default=18)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
