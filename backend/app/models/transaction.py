"""
Cash-register transaction database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Enum
from backend.app.db.session import Base
from backend.app.db.types import UTCDateTime
from backend.app.models.enums import TransactionType


class Transaction(Base):
    __tablename__ = "transactions"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    type = Column(Enum(TransactionType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    category = Column(String(50), nullable=False)
    description = Column(String(500), nullable=True)
    date = Column(UTCDateTime, nullable=False, index=True)
    
    created_at = Column(UTCDateTime, nullable=False)
    
    def __repr__(self):
        return f"<Transaction(id={self.id}, user={self.user_id}, type='{self.type.value}', amount={self.amount})>"
