from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.constants import PAYMENT_MODES


class PaymentCreate(BaseModel):
    payment_date: date
    amount: Decimal = Field(..., gt=0)
    payment_mode: str = "Cash"
    reference_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("payment_mode")
    @classmethod
    def known_mode(cls, v: str) -> str:
        if v not in PAYMENT_MODES:
            raise ValueError(f"payment_mode must be one of {', '.join(PAYMENT_MODES)}")
        return v


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    payment_date: date
    amount: float
    payment_mode: str
    reference_number: Optional[str] = None
    notes: Optional[str] = None
