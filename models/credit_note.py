from sqlalchemy import Column, Integer, String, Date, Numeric, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class CreditNote(Base):
    __tablename__ = "credit_notes"

    id = Column(Integer, primary_key=True)
    credit_note_number = Column(Integer, unique=True, index=True, nullable=False)
    credit_note_date = Column(Date, index=True, nullable=False)
    original_invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True)

    # frozen party snapshot
    party_id = Column(Integer, ForeignKey("parties.id", ondelete="SET NULL"), index=True, nullable=True)
    party_gstin = Column(String(15), index=True, nullable=True)
    party_name = Column(String(255), nullable=False)
    party_address = Column(Text, nullable=True)
    party_state = Column(String(64), nullable=True)
    party_state_code = Column(String(2), nullable=True)

    reason = Column(String(64), nullable=False)

    amount_before_tax = Column(Numeric(14, 2), nullable=False, default=0)
    cgst_rate = Column(Numeric(5, 2), nullable=True)
    cgst_amount = Column(Numeric(14, 2), nullable=True)
    sgst_rate = Column(Numeric(5, 2), nullable=True)
    sgst_amount = Column(Numeric(14, 2), nullable=True)
    igst_rate = Column(Numeric(5, 2), nullable=True)
    igst_amount = Column(Numeric(14, 2), nullable=True)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)  # positive magnitude; reduces amount owed
    amount_in_words = Column(String(512), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship(
        "CreditNoteItem",
        back_populates="credit_note",
        cascade="all, delete-orphan",
        order_by="CreditNoteItem.serial_number",
    )


class CreditNoteItem(Base):
    __tablename__ = "credit_note_items"

    id = Column(Integer, primary_key=True)
    credit_note_id = Column(Integer, ForeignKey("credit_notes.id", ondelete="CASCADE"), index=True, nullable=False)

    serial_number = Column(Integer, nullable=False)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(255), nullable=False)
    hsn_code = Column(String(16), nullable=True)

    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(16), nullable=False, default="Pcs")
    rate = Column(Numeric(14, 2), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)

    credit_note = relationship("CreditNote", back_populates="items")
