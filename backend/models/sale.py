from sqlalchemy import Column, Integer, String, Numeric, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class Sale(Base, AuditMixin):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), nullable=False, unique=True, index=True)  # SAL-00001
    date = Column(Date, nullable=False)
    user_id = Column(String, nullable=True)
    stock_location = Column(String(150), nullable=True)
    price = Column(Numeric(18, 2), nullable=False, default=0)  # total of the line prices
    total_cogs = Column(Numeric(18, 2), nullable=False, default=0)
    journal_page_id = Column(Integer, ForeignKey("journal_pages.id"), nullable=True)

    # Relationships
    details = relationship("SaleDetail", back_populates="sale", cascade="all, delete-orphan", order_by="SaleDetail.id")


class SaleDetail(Base):
    __tablename__ = "sale_details"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    item_code = Column(String(20), nullable=False)
    item_detail_id = Column(Integer, ForeignKey("item_details.id"), nullable=False)
    qty = Column(Numeric(18, 4), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)  # line total
    calculated_cogs = Column(Numeric(18, 2), nullable=False, default=0)

    sale = relationship("Sale", back_populates="details")
