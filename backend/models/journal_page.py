from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class JournalPage(Base, AuditMixin):
    """One accounting transaction: an atomic, balanced group of posts."""
    __tablename__ = "journal_pages"

    id = Column(Integer, primary_key=True, index=True)
    currency_id = Column(Integer, nullable=True)
    user_id = Column(String, nullable=True, index=True)
    ref = Column(String(50), nullable=True)
    source = Column(String(50), nullable=False)  # "Manual Entry", "Purchase", "Sale", "Exchange"
    description = Column(String(500), nullable=True)

    # Relationships
    posts = relationship(
        "JournalPost",
        back_populates="journal_page",
        cascade="all, delete-orphan",
        order_by="JournalPost.id",
    )
