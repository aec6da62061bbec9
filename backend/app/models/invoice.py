"""
Sales invoice database model.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum, JSON
from backend.app.db.session import Base
from backend.app.db.types import UTCDateTime
from backend.app.models.enums import InvoiceStatus


class Invoice(Base):
    """
    Invoice issued by a client to one of their customers.
    
    Line items are kept as an ordered JSON list of
    {description, quantity, unit_price, total}.
    """
    __tablename__ = "invoices"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    invoice_number = Column(String(100), nullable=False)
    client_name = Column(String(200), nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    issue_date = Column(UTCDateTime, nullable=False, index=True)
    due_date = Column(UTCDateTime, nullable=False)
    status = Column(Enum(InvoiceStatus, values_callable=lambda e: [m.value for m in e]), nullable=False)
    items = Column(JSON, nullable=False)
    notes = Column(Text, nullable=True)
    
    created_at = Column(UTCDateTime, nullable=False)
    
    def __repr__(self):
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', status='{self.status.value}')>"
