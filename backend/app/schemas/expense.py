"""
Purchase expense schemas.
"""

from pydantic import BaseModel, Field
from backend.app.schemas.common import UTCDatetime
from typing import Optional
from backend.app.models.enums import ExpenseType, ReviewStatus


class ExpenseCreate(BaseModel):
    """Fields of a submitted purchase invoice (multipart form on the API)."""
    type: ExpenseType
    amount: int = Field(..., gt=0, description="Amount in cents")
    supplier_name: str = Field(..., min_length=1, max_length=200)
    invoice_date: UTCDatetime
    notes: Optional[str] = Field(None, max_length=1000)


class ReviewStatusUpdate(BaseModel):
    """Body of PATCH /expenses/{id}/status and /documents/{id}/status."""
    status: ReviewStatus


class ExpenseRecord(BaseModel):
    """Stored expense. reviewed_by/reviewed_at are set together by a review."""
    id: int
    user_id: int
    type: ExpenseType
    amount: int
    supplier_name: str
    invoice_date: UTCDatetime
    status: ReviewStatus
    notes: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    created_at: UTCDatetime
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[UTCDatetime] = None
    
    class Config:
        from_attributes = True
        frozen = True
