"""
Notification Database Model.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from backend.app.db.session import Base
from backend.app.db.types import UTCDateTime


class Notification(Base):
    """
    In-App Notification.
    Created as a side effect of submissions and reviews.
    """
    __tablename__ = "notifications"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Recipient
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    # Content
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    
    # State
    read = Column(Boolean, default=False, nullable=False, index=True)
    
    # Timestamps
    created_at = Column(UTCDateTime, nullable=False, index=True)
    
    def __repr__(self):
        return f"<Notification(id={self.id}, user={self.user_id}, title='{self.title}')>"
