"""
Supporting document database model.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum
from backend.app.db.session import Base
from backend.app.db.types import UTCDateTime
from backend.app.models.enums import DocumentType, ReviewStatus


class Document(Base):
    __tablename__ = "documents"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    type = Column(Enum(DocumentType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    title = Column(String(200), nullable=False)
    file_url = Column(String(500), nullable=False)
    file_name = Column(String(255), nullable=False)
    upload_date = Column(UTCDateTime, nullable=False, index=True)
    status = Column(Enum(ReviewStatus, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)
    notes = Column(Text, nullable=True)
    
    # Review pair, written together
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(UTCDateTime, nullable=True)
    
    def __repr__(self):
        return f"<Document(id={self.id}, title='{self.title}', status='{self.status.value}')>"
