from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemIn(BaseModel):
    name: str = Field(..., min_length=1)
    hsn_code: Optional[str] = None
    default_unit: str = "Pcs"
    default_rate: Optional[Decimal] = Field(None, ge=0)
    gst_rate: Decimal = Field(Decimal("18"), ge=0, le=100)


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    hsn_code: Optional[str] = None
    default_unit: Optional[str] = None
    default_rate: Optional[Decimal] = Field(None, ge=0)
    gst_rate: Optional[Decimal] = Field(None, ge=0, le=100)


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    hsn_code: Optional[str] = None
    default_unit: str
    default_rate: Optional[float] = None
    gst_rate: float
