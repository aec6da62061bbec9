"""
Notification Schemas.
"""

from pydantic import BaseModel
from backend.app.schemas.common import UTCDatetime
from typing import Optional


class NotificationCreate(BaseModel):
    user_id: int
    title: str
    message: str
    link: Optional[str] = None


class NotificationRecord(BaseModel):
    id: int
    user_id: int
    title: str
    message: str
    read: bool = False
    created_at: UTCDatetime
    link: Optional[str] = None
    
    class Config:
        from_attributes = True
        frozen = True


class MarkAllReadResponse(BaseModel):
    status: str = "success"
    count: int


class ReviewNotice(BaseModel):
    """Message for a record's owner, stored together with the review that triggers it."""
    title: str
    message: str
    link: Optional[str] = None
