"""
Cash-register transaction schemas.
"""

from pydantic import BaseModel, Field, model_validator
from backend.app.schemas.common import UTCDatetime
from typing import Optional
from backend.app.models.enums import TransactionType, TRANSACTION_CATEGORIES


class TransactionCreate(BaseModel):
    """Schema for recording a cash-register movement."""
    type: TransactionType
    amount: int = Field(..., gt=0, description="Amount in cents")
    category: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    date: UTCDatetime
    
    @model_validator(mode="after")
    def check_category_matches_type(self):
        allowed = TRANSACTION_CATEGORIES[self.type]
        if self.category not in allowed:
            raise ValueError(
                f"Category '{self.category}' is not valid for {self.type.value} "
                f"(expected one of: {', '.join(sorted(allowed))})"
            )
        return self


class TransactionRecord(BaseModel):
    """Stored transaction."""
    id: int
    user_id: int
    type: TransactionType
    amount: int
    category: str
    description: Optional[str] = None
    date: UTCDatetime
    created_at: UTCDatetime
    
    class Config:
        from_attributes = True
        frozen = True


class TransactionSummary(BaseModel):
    """Cash-register totals for one user, in cents."""
    total_income: int
    total_expense: int
    balance: int
    count: int
