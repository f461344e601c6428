from sqlalchemy import Column, Integer, String, ForeignKey
from database import Base
from models.audit_mixin import TimestampMixin

class FinancialSettings(Base, TimestampMixin):
    """Singleton row holding the accounts used by automatic postings."""
    __tablename__ = "financial_settings"

    id = Column(Integer, primary_key=True, default=1)

    # Default Accounts
    cash_account_number = Column(String(20), ForeignKey("accounts.account_number"), nullable=False)
    inventory_account_number = Column(String(20), ForeignKey("accounts.account_number"), nullable=False)
    sales_account_number = Column(String(20), ForeignKey("accounts.account_number"), nullable=False)
    cogs_account_number = Column(String(20), ForeignKey("accounts.account_number"), nullable=False)
