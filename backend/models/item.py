from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class Item(Base, AuditMixin):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    category_id = Column(Integer, nullable=True)
    # Canonical unit in which stock quantities are stored
    base_unit_id = Column(Integer, ForeignKey("units.id"), nullable=False)

    base_unit = relationship("Unit")
    details = relationship("ItemDetail", back_populates="item")
