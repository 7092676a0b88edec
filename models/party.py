from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime
from sqlalchemy.sql import func

from models.base import Base


class Party(Base):
    __tablename__ = "parties"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), index=True, nullable=False)
    gstin = Column(String(15), index=True, nullable=True)
    address = Column(Text, nullable=True)
    state = Column(String(64), nullable=True)
    state_code = Column(String(2), nullable=True)
    phone = Column(String(32), nullable=True)
    email = Column(String(255), nullable=True)
    payment_terms = Column(String(16), nullable=True)  # "Net 30", "COD", ...

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, index=True, nullable=False)
    hsn_code = Column(String(16), nullable=True)
    default_unit = Column(String(16), nullable=False, default="Pcs")
    default_rate = Column(Numeric(14, 2), nullable=True)
    gst_rate = Column(Numeric(5, 2), nullable=False, default=18)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
