from pydantic import BaseModel, Field, field_validator
from typing import Optional
from decimal import Decimal
from datetime import datetime

EXCHANGE_OPTIONS = ["USDtoKHR", "KHRtoUSD"]

class CurrencyExchangeCreate(BaseModel):
    exchange_option: str
    from_amount: Decimal = Field(..., gt=0)
    rate: Decimal = Field(..., gt=0)  # KHR per USD
    bank_location: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator('exchange_option')
    @classmethod
    def validate_exchange_option(cls, v):
        if v not in EXCHANGE_OPTIONS:
            raise ValueError(f"exchange_option must be one of {EXCHANGE_OPTIONS}")
        return v

class CurrencyExchange(BaseModel):
    id: int
    timestamp: datetime
    user_id: Optional[str] = None
    exchange_option: str
    from_amount: Decimal
    to_amount: Decimal
    rate: Decimal
    bank_location: str
    description: Optional[str] = None
    disabled: bool

    class Config:
        from_attributes = True
