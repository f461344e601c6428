from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime

class ItemDetailBase(BaseModel):
    item_id: int
    unit_id: int
    conversion_factor: int = Field(..., ge=1)
    price: Optional[Decimal] = Field(None, ge=0)

class ItemDetailCreate(ItemDetailBase):
    code: Optional[str] = Field(None, max_length=20)  # generated as CAM-0001 when omitted

class ItemDetailUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    unit_id: Optional[int] = None
    conversion_factor: Optional[int] = Field(None, ge=1)
    price: Optional[Decimal] = Field(None, ge=0)

class ItemDetail(ItemDetailBase):
    id: int
    code: str
    disabled: bool
    created_at: datetime

    class Config:
        from_attributes = True
