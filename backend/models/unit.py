from sqlalchemy import Column, Integer, String
from database import Base
from models.audit_mixin import AuditMixin

class Unit(Base, AuditMixin):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)  # e.g. "kg", "Bag-25kg", "Case"
