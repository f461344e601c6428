from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

class InventoryLogCreate(BaseModel):
    """Manual stock movement (adjustments, returns, opening stock)."""
    item_id: int
    item_detail_id: Optional[int] = None
    unit_id: int
    transaction_type: str = Field(..., max_length=30)
    quantity: Decimal
    cost_price_per_base_unit: Optional[Decimal] = None
    sale_price_per_transacted_unit: Optional[Decimal] = None
    notes: Optional[str] = Field(None, max_length=500)

class InventoryLog(BaseModel):
    id: int
    item_id: int
    item_detail_id: Optional[int] = None
    user_id: Optional[str] = None
    timestamp: datetime
    transaction_type: str
    quantity_transacted: Decimal
    unit_id_transacted: int
    conversion_factor_applied: int
    quantity_in_base_units: int
    cost_price_per_base_unit: Optional[Decimal] = None
    sale_price_per_transacted_unit: Optional[Decimal] = None
    reference_code: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class InventoryLogList(BaseModel):
    items: List[InventoryLog]
    total_count: int
    page: int
    page_size: int
