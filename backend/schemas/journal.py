from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

class JournalPostBase(BaseModel):
    account_number: str = Field(..., min_length=1, max_length=20)
    description: Optional[str] = Field(None, max_length=500)
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    ref: Optional[str] = Field(None, max_length=50)

class JournalPostCreate(JournalPostBase):
    pass

class JournalPost(JournalPostBase):
    id: int
    account_name: Optional[str] = None

class JournalPageBase(BaseModel):
    currency_id: Optional[int] = None
    ref: Optional[str] = Field(None, max_length=50)
    source: str = Field(..., min_length=1, max_length=50)  # "Manual Entry", "Sale", "Purchase"
    description: Optional[str] = Field(None, max_length=500)

class JournalPageCreate(JournalPageBase):
    entries: List[JournalPostCreate] = []

class JournalPage(JournalPageBase):
    id: int
    user_id: Optional[str] = None
    created_at: datetime
    disabled: bool
    posts: List[JournalPost] = []
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool

class JournalPageList(BaseModel):
    items: List[JournalPage]
    total_count: int
    page: int
    page_size: int
