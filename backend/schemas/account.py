from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

VALID_NORMAL_BALANCES = ["debit", "credit"]
VALID_CURRENCY_CODES = ["USD", "KHR"]


class AccountCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)

class AccountCategory(AccountCategoryCreate):
    id: int
    disabled: bool

    class Config:
        from_attributes = True


class AccountSubCategoryCreate(BaseModel):
    category_id: int
    name: str = Field(..., min_length=1, max_length=100)

class AccountSubCategory(AccountSubCategoryCreate):
    id: int
    disabled: bool

    class Config:
        from_attributes = True


class AccountBase(BaseModel):
    account_number: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=150)
    category_id: int
    sub_category_id: Optional[int] = None
    normal_balance: str
    currency_code: Optional[str] = None

    @field_validator('normal_balance')
    @classmethod
    def validate_normal_balance(cls, v):
        v = v.lower()
        if v not in VALID_NORMAL_BALANCES:
            raise ValueError(f"normal_balance must be one of {VALID_NORMAL_BALANCES}")
        return v

    @field_validator('currency_code')
    @classmethod
    def validate_currency_code(cls, v):
        if v is None:
            return v
        v = v.upper()
        if v not in VALID_CURRENCY_CODES:
            raise ValueError(f"currency_code must be one of {VALID_CURRENCY_CODES}")
        return v

class AccountCreate(AccountBase):
    pass

class AccountUpdate(BaseModel):
    # account_number and normal_balance are fixed once the account exists
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    category_id: Optional[int] = None
    sub_category_id: Optional[int] = None
    currency_code: Optional[str] = None

    @field_validator('currency_code')
    @classmethod
    def validate_currency_code(cls, v):
        if v is None:
            return v
        v = v.upper()
        if v not in VALID_CURRENCY_CODES:
            raise ValueError(f"currency_code must be one of {VALID_CURRENCY_CODES}")
        return v

class Account(AccountBase):
    id: int
    disabled: bool
    created_at: datetime
    category_name: Optional[str] = None
    sub_category_name: Optional[str] = None

    class Config:
        from_attributes = True


class AccountLedgerLine(BaseModel):
    post_id: int
    journal_page_id: int
    journal_page_date: datetime
    journal_page_source: str
    journal_page_user: Optional[str] = None
    ref: Optional[str] = None
    description: Optional[str] = None
    debit: Decimal
    credit: Decimal

class AccountLedger(BaseModel):
    account_number: str
    name: str
    normal_balance: str
    category_name: Optional[str] = None
    sub_category_name: Optional[str] = None
    lines: List[AccountLedgerLine] = []
    total_count: int
    page: int
    page_size: int
