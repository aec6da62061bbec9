"""
User database model.
"""

from sqlalchemy import Column, Integer, String, Enum
from backend.app.db.session import Base
from backend.app.db.types import UTCDateTime
from backend.app.models.enums import UserRole


class User(Base):
    """
    A client or accountant account.
    
    Owns transactions, invoices, expenses, documents and notifications via user_id.
    """
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)
    profile_image_url = Column(String(500), nullable=True)
    
    created_at = Column(UTCDateTime, nullable=False)
    
    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role.value}')>"
