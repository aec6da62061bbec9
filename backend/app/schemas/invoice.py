"""
Sales invoice schemas.
"""

from pydantic import BaseModel, Field, model_validator
from backend.app.schemas.common import UTCDatetime
from typing import Optional, List
from backend.app.models.enums import InvoiceStatus


class InvoiceItem(BaseModel):
    """One invoice line. Prices are in cents."""
    description: str = Field(..., min_length=1, max_length=500)
    quantity: int = Field(..., gt=0)
    unit_price: int = Field(..., gt=0, description="Unit price in cents")
    total: int = Field(..., gt=0, description="Line total in cents")
    
    class Config:
        frozen = True


class InvoiceCreate(BaseModel):
    """Schema for creating an invoice."""
    invoice_number: str = Field(..., min_length=1, max_length=100)
    client_name: str = Field(..., min_length=1, max_length=200)
    amount: int = Field(..., gt=0, description="Invoice total in cents")
    issue_date: UTCDatetime
    due_date: UTCDatetime
    status: InvoiceStatus = InvoiceStatus.DRAFT
    items: List[InvoiceItem] = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=1000)
    
    @model_validator(mode="after")
    def check_due_after_issue(self):
        if self.due_date < self.issue_date:
            raise ValueError("due_date must not be before issue_date")
        return self


class InvoiceStatusUpdate(BaseModel):
    """Body of PATCH /invoices/{id}/status."""
    status: InvoiceStatus


class InvoiceRecord(BaseModel):
    """Stored invoice."""
    id: int
    user_id: int
    invoice_number: str
    client_name: str
    amount: int
    issue_date: UTCDatetime
    due_date: UTCDatetime
    status: InvoiceStatus
    items: List[InvoiceItem]
    notes: Optional[str] = None
    created_at: UTCDatetime
    
    class Config:
        from_attributes = True
        frozen = True
