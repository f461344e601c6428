from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

class ItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category_id: Optional[int] = None
    base_unit_id: int

class ItemCreate(ItemBase):
    pass

class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category_id: Optional[int] = None
    base_unit_id: Optional[int] = None

class Item(ItemBase):
    id: int
    disabled: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ItemStockUnitDetail(BaseModel):
    item_detail_id: int
    code: str
    unit_id: int
    unit_name: str
    conversion_factor: int
    quantity: Decimal  # stock expressed in this packaging unit
    price: Optional[Decimal] = None
    is_base_unit: bool

class ItemStock(BaseModel):
    item_id: int
    item_name: str
    base_unit_id: int
    base_unit_name: str
    quantity_in_base_units: int
    units: List[ItemStockUnitDetail] = []
