from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from datetime import date, datetime

class PurchaseDetailCreate(BaseModel):
    item_code: str = Field(..., min_length=1, max_length=20)
    qty: int = Field(..., ge=1)
    cost: Decimal = Field(..., gt=0)  # line total

class PurchaseCreate(BaseModel):
    date: date
    supplier_name: Optional[str] = Field(None, max_length=150)
    stock_location: Optional[str] = Field(None, max_length=150)
    details: List[PurchaseDetailCreate] = []

class PurchaseDetail(BaseModel):
    id: int
    item_code: str
    item_detail_id: int
    qty: int
    cost: Decimal

    class Config:
        from_attributes = True

class Purchase(BaseModel):
    id: int
    code: str
    date: date
    user_id: Optional[str] = None
    supplier_name: Optional[str] = None
    stock_location: Optional[str] = None
    cost: Decimal
    journal_page_id: Optional[int] = None
    disabled: bool
    created_at: datetime
    details: List[PurchaseDetail] = []

    class Config:
        from_attributes = True

class PurchaseList(BaseModel):
    items: List[Purchase]
    total_count: int
    page: int
    page_size: int
