"""
Purchase expense database model.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum
from backend.app.db.session import Base
from backend.app.db.types import UTCDateTime
from backend.app.models.enums import ExpenseType, ReviewStatus


class Expense(Base):
    """
    Supplier invoice submitted by a client for accountant review.
    """
    __tablename__ = "expenses"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    type = Column(Enum(ExpenseType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    supplier_name = Column(String(200), nullable=False)
    invoice_date = Column(UTCDateTime, nullable=False, index=True)
    status = Column(Enum(ReviewStatus, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)
    notes = Column(Text, nullable=True)
    file_url = Column(String(500), nullable=True)
    file_name = Column(String(255), nullable=True)
    
    created_at = Column(UTCDateTime, nullable=False)
    
    # Review pair, written together
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(UTCDateTime, nullable=True)
    
    def __repr__(self):
        return f"<Expense(id={self.id}, user={self.user_id}, status='{self.status.value}')>"
