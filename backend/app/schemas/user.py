"""
User schemas.

UserRecord is the stored shape and carries the password hash.
UserResponse is the only shape that leaves the service and has no secret.
"""

from pydantic import BaseModel, Field
from backend.app.schemas.common import UTCDatetime
from typing import Optional
from backend.app.models.enums import UserRole


class UserCreate(BaseModel):
    """Input for creating a user in the record store."""
    username: str
    hashed_password: str
    email: str
    full_name: str
    role: UserRole
    profile_image_url: Optional[str] = None


class UserRecord(BaseModel):
    """Stored user, including the password hash."""
    id: int
    username: str
    hashed_password: str
    email: str
    full_name: str
    role: UserRole
    profile_image_url: Optional[str] = None
    created_at: UTCDatetime
    
    class Config:
        from_attributes = True
        frozen = True


class UserResponse(BaseModel):
    """
    Public user representation.
    
    Used by GET /auth/me and the accountant client list.
    """
    id: int
    username: str
    email: str
    full_name: str = Field(..., description="Display name")
    role: UserRole
    profile_image_url: Optional[str] = None
    created_at: UTCDatetime
    
    class Config:
        from_attributes = True
