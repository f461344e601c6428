from pydantic import BaseModel
from typing import Optional

class FinancialSettingsBase(BaseModel):
    cash_account_number: Optional[str] = None
    inventory_account_number: Optional[str] = None
    sales_account_number: Optional[str] = None
    cogs_account_number: Optional[str] = None

class FinancialSettingsUpdate(FinancialSettingsBase):
    pass

class FinancialSettings(FinancialSettingsBase):
    id: int

    class Config:
        from_attributes = True
