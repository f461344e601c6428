from sqlalchemy import Column, Integer, String, Numeric, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class Purchase(Base, AuditMixin):
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), nullable=False, unique=True, index=True)  # PUR-00001
    date = Column(Date, nullable=False)
    user_id = Column(String, nullable=True)
    supplier_name = Column(String(150), nullable=True)
    stock_location = Column(String(150), nullable=True)
    cost = Column(Numeric(18, 2), nullable=False, default=0)  # total of the line costs
    journal_page_id = Column(Integer, ForeignKey("journal_pages.id"), nullable=True)

    # Relationships
    details = relationship("PurchaseDetail", back_populates="purchase", cascade="all, delete-orphan", order_by="PurchaseDetail.id")


class PurchaseDetail(Base):
    __tablename__ = "purchase_details"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False, index=True)
    item_code = Column(String(20), nullable=False)
    item_detail_id = Column(Integer, ForeignKey("item_details.id"), nullable=False)
    qty = Column(Integer, nullable=False)
    cost = Column(Numeric(18, 2), nullable=False)  # line total

    purchase = relationship("Purchase", back_populates="details")
