"""
Cash-register transaction endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from backend.app.core.dependencies import get_current_user, get_workflow
from backend.app.schemas.transaction import TransactionCreate, TransactionRecord, TransactionSummary
from backend.app.schemas.user import UserRecord
from backend.app.services.workflow import WorkflowService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionRecord, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """Record an income or expense movement for the current user."""
    return await workflow.record_transaction(current_user, transaction_data)


@router.get("", response_model=List[TransactionRecord])
async def list_transactions(
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """List the current user's transactions, most recent first."""
    return await workflow.list_transactions(current_user)


@router.get("/summary", response_model=TransactionSummary)
async def transaction_summary(
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """Income, expense and balance totals in cents."""
    return await workflow.transaction_summary(current_user)
