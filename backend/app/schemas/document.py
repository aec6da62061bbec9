"""
Supporting document schemas.
"""

from pydantic import BaseModel, Field
from backend.app.schemas.common import UTCDatetime
from typing import Optional
from backend.app.models.enums import DocumentType, ReviewStatus


class DocumentCreate(BaseModel):
    """Fields of an uploaded document (multipart form on the API)."""
    type: DocumentType
    title: str = Field(..., min_length=1, max_length=200)
    notes: Optional[str] = Field(None, max_length=1000)


class DocumentRecord(BaseModel):
    """Stored document. reviewed_by/reviewed_at are set together by a review."""
    id: int
    user_id: int
    type: DocumentType
    title: str
    file_url: str
    file_name: str
    upload_date: UTCDatetime
    status: ReviewStatus
    notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[UTCDatetime] = None
    
    class Config:
        from_attributes = True
        frozen = True
