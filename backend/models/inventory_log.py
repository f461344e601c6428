from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime
from database import Base
from models.audit_mixin import local_now

class InventoryLog(Base):
    """
    Append-only stock movement. Rows are never updated or deleted; corrections
    are recorded as new offsetting adjustment rows.
    """
    __tablename__ = "inventory_logs"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    item_detail_id = Column(Integer, ForeignKey("item_details.id"), nullable=True)
    user_id = Column(String, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=local_now, nullable=False, index=True)
    transaction_type = Column(String(30), nullable=False)
    quantity_transacted = Column(Numeric(18, 4), nullable=False)
    unit_id_transacted = Column(Integer, ForeignKey("units.id"), nullable=False)
    # Snapshot of the factor in force when the movement was recorded
    conversion_factor_applied = Column(Integer, nullable=False)
    quantity_in_base_units = Column(Integer, nullable=False)
    cost_price_per_base_unit = Column(Numeric(18, 4), nullable=True)
    sale_price_per_transacted_unit = Column(Numeric(18, 4), nullable=True)
    reference_code = Column(String(20), nullable=True)  # PUR-00001 / SAL-00001 for document rows
    notes = Column(String(500), nullable=True)
