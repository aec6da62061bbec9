"""
Purchase expense endpoints.

Clients submit expenses (optionally with the supplier invoice file);
accountants validate or reject them.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from backend.app.core.dependencies import get_current_user, get_file_storage, get_workflow
from backend.app.models.enums import ExpenseType
from backend.app.schemas.expense import ExpenseCreate, ExpenseRecord, ReviewStatusUpdate
from backend.app.schemas.user import UserRecord
from backend.app.services.file_storage import LocalFileStorage
from backend.app.services.workflow import WorkflowService

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.post("", response_model=ExpenseRecord, status_code=status.HTTP_201_CREATED)
async def submit_expense(
    type: ExpenseType = Form(...),
    amount: int = Form(..., gt=0, description="Amount in cents"),
    supplier_name: str = Form(..., min_length=1, max_length=200),
    invoice_date: datetime = Form(...),
    notes: Optional[str] = Form(None, max_length=1000),
    file: Optional[UploadFile] = File(None),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
    file_storage: LocalFileStorage = Depends(get_file_storage)
):
    """
    Submit a purchase invoice for review.
    
    The expense starts as pending and the accountant is notified.
    """
    expense_data = ExpenseCreate(
        type=type,
        amount=amount,
        supplier_name=supplier_name,
        invoice_date=invoice_date,
        notes=notes,
    )
    stored_file = await file_storage.save_optional(file)
    try:
        return await workflow.submit_expense(current_user, expense_data, stored_file)
    except Exception:
        file_storage.discard(stored_file)
        raise


@router.get("", response_model=List[ExpenseRecord])
async def list_expenses(
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """List the current user's expenses, most recent invoice date first."""
    return await workflow.list_expenses(current_user)


@router.get("/{expense_id}", response_model=ExpenseRecord)
async def get_expense(
    expense_id: int = Path(..., description="Expense ID"),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    return await workflow.get_expense(expense_id, current_user)


@router.patch("/{expense_id}/status", response_model=ExpenseRecord)
async def review_expense(
    body: ReviewStatusUpdate,
    expense_id: int = Path(..., description="Expense ID"),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """
    Validate or reject an expense (accountant only).
    
    The owner receives a notification on every review.
    """
    return await workflow.update_expense_status(expense_id, body.status, current_user)
