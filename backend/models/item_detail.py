from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class ItemDetail(Base, AuditMixin):
    """A packaging / SKU variant of an item, e.g. "Bag-25kg" of "Rice"."""
    __tablename__ = "item_details"
    __table_args__ = (
        CheckConstraint('conversion_factor >= 1', name='check_item_detail_conversion_factor'),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), nullable=False, index=True)  # business key used by purchase / sale lines
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    unit_id = Column(Integer, ForeignKey("units.id"), nullable=False)
    conversion_factor = Column(Integer, nullable=False, default=1)  # base units per one of this unit
    price = Column(Numeric(18, 4), nullable=True)

    item = relationship("Item", back_populates="details")
    unit = relationship("Unit")
