from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint, String
from sqlalchemy.orm import relationship
from database import Base

class JournalPost(Base):
    __tablename__ = "journal_posts"

    id = Column(Integer, primary_key=True, index=True)
    journal_page_id = Column(Integer, ForeignKey("journal_pages.id"), nullable=False, index=True)
    account_number = Column(String(20), ForeignKey("accounts.account_number"), nullable=False, index=True)
    ref = Column(String(50), nullable=True)
    description = Column(String(500), nullable=True)
    debit = Column(Numeric(18, 2), CheckConstraint('debit >= 0'), nullable=False, default=0)
    credit = Column(Numeric(18, 2), CheckConstraint('credit >= 0'), nullable=False, default=0)

    # Relationships
    journal_page = relationship("JournalPage", back_populates="posts")
    account = relationship("Account")

    __table_args__ = (
        CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0) OR (debit = 0 AND credit = 0)',
            name='check_debit_or_credit_exclusive'
        ),
    )
