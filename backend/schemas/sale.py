from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from datetime import date, datetime

class SaleDetailCreate(BaseModel):
    item_code: str = Field(..., min_length=1, max_length=20)
    qty: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)  # line total

class SaleCreate(BaseModel):
    date: date
    stock_location: Optional[str] = Field(None, max_length=150)
    details: List[SaleDetailCreate] = []

class SaleDetail(BaseModel):
    id: int
    item_code: str
    item_detail_id: int
    qty: Decimal
    price: Decimal
    calculated_cogs: Decimal

    class Config:
        from_attributes = True

class Sale(BaseModel):
    id: int
    code: str
    date: date
    user_id: Optional[str] = None
    stock_location: Optional[str] = None
    price: Decimal
    total_cogs: Decimal
    journal_page_id: Optional[int] = None
    disabled: bool
    created_at: datetime
    details: List[SaleDetail] = []

    class Config:
        from_attributes = True

class SaleList(BaseModel):
    items: List[Sale]
    total_count: int
    page: int
    page_size: int
