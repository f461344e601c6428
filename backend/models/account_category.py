from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class AccountCategory(Base, AuditMixin):
    __tablename__ = "account_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)  # Asset, Liability, Equity, Revenue, Expense, COGS

    sub_categories = relationship("AccountSubCategory", back_populates="category")


class AccountSubCategory(Base, AuditMixin):
    __tablename__ = "account_sub_categories"
    __table_args__ = (UniqueConstraint('category_id', 'name', name='_account_sub_category_name_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("account_categories.id"), nullable=False)
    name = Column(String(100), nullable=False)  # e.g. "Cash", "Current Liabilities"

    category = relationship("AccountCategory", back_populates="sub_categories")
