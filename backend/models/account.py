from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class Account(Base, AuditMixin):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("normal_balance IN ('debit', 'credit')", name='check_account_normal_balance'),
    )

    id = Column(Integer, primary_key=True, index=True)
    account_number = Column(String(20), nullable=False, unique=True, index=True)
    name = Column(String(150), nullable=False)
    category_id = Column(Integer, ForeignKey("account_categories.id"), nullable=False)
    sub_category_id = Column(Integer, ForeignKey("account_sub_categories.id"), nullable=True)
    normal_balance = Column(String(6), nullable=False)  # debit / credit, fixed at creation
    currency_code = Column(String(3), nullable=True)  # USD / KHR, inferred from the name when empty

    category = relationship("AccountCategory")
    sub_category = relationship("AccountSubCategory")

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def sub_category_name(self):
        return self.sub_category.name if self.sub_category else None
