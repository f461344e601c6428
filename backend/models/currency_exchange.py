from sqlalchemy import Column, Integer, String, Numeric, DateTime
from database import Base
from models.audit_mixin import AuditMixin, local_now

class CurrencyExchange(Base, AuditMixin):
    __tablename__ = "currency_exchanges"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime(timezone=True), default=local_now, nullable=False, index=True)
    user_id = Column(String, nullable=True)
    exchange_option = Column(String(10), nullable=False)  # USDtoKHR / KHRtoUSD
    from_amount = Column(Numeric(18, 2), nullable=False)
    to_amount = Column(Numeric(18, 2), nullable=False)
    rate = Column(Numeric(18, 4), nullable=False)  # KHR per USD
    bank_location = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
