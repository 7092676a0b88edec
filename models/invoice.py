from sqlalchemy import Column, Integer, String, Date, Numeric, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(Integer, unique=True, index=True, nullable=True)  # NULL => draft
    is_draft = Column(Boolean, nullable=False, default=False)
    invoice_date = Column(Date, index=True, nullable=False)
    due_date = Column(Date, nullable=True)

    # frozen snapshot of the party at billing time (party may change or be deleted later)
    party_id = Column(Integer, ForeignKey("parties.id", ondelete="SET NULL"), index=True, nullable=True)
    party_gstin = Column(String(15), index=True, nullable=True)
    billed_to_name = Column(String(255), nullable=False)
    billed_to_address = Column(Text, nullable=True)
    billed_to_state = Column(String(64), nullable=True)
    billed_to_state_code = Column(String(2), nullable=True)
    shipped_to_name = Column(String(255), nullable=True)
    shipped_to_address = Column(Text, nullable=True)
    shipped_to_state = Column(String(64), nullable=True)
    shipped_to_state_code = Column(String(2), nullable=True)
    shipped_to_phone = Column(String(32), nullable=True)

    transport_mode = Column(String(16), nullable=True)
    vehicle_number = Column(String(32), nullable=True)
    gr_rr_number = Column(String(64), nullable=True)
    place_of_supply = Column(String(64), nullable=True)
    place_of_supply_state_code = Column(String(2), nullable=True)
    total_packages = Column(Integer, nullable=True)

    amount_before_tax = Column(Numeric(14, 2), nullable=False, default=0)
    packaging_charges = Column(Numeric(14, 2), nullable=False, default=0)
    sub_total = Column(Numeric(14, 2), nullable=False, default=0)
    cgst_rate = Column(Numeric(5, 2), nullable=True)
    cgst_amount = Column(Numeric(14, 2), nullable=True)
    sgst_rate = Column(Numeric(5, 2), nullable=True)
    sgst_amount = Column(Numeric(14, 2), nullable=True)
    igst_rate = Column(Numeric(5, 2), nullable=True)
    igst_amount = Column(Numeric(14, 2), nullable=True)
    grand_total = Column(Numeric(14, 2), nullable=False, default=0)
    amount_in_words = Column(String(512), nullable=True)

    reverse_charge = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.serial_number",
    )
    payments = relationship(
        "Payment",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="Payment.payment_date",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), index=True, nullable=False)

    serial_number = Column(Integer, nullable=False)  # 1-based, contiguous
    item_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(255), nullable=False)
    hsn_code = Column(String(16), nullable=True)

    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(16), nullable=False, default="Pcs")
    rate = Column(Numeric(14, 2), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)  # round(quantity * rate, 2)

    invoice = relationship("Invoice", back_populates="items")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), index=True, nullable=False)

    payment_date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_mode = Column(String(16), nullable=False, default="Cash")  # Cash / Bank Transfer / UPI / Cheque
    reference_number = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    invoice = relationship("Invoice", back_populates="payments")
