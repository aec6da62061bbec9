"""
Sales invoice endpoints.

Invoice status may be changed by its owner or by any accountant.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status
from backend.app.core.dependencies import get_current_user, get_workflow
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRecord, InvoiceStatusUpdate
from backend.app.schemas.user import UserRecord
from backend.app.services.workflow import WorkflowService

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post("", response_model=InvoiceRecord, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """Create an invoice owned by the current user."""
    return await workflow.create_invoice(current_user, invoice_data)


@router.get("", response_model=List[InvoiceRecord])
async def list_invoices(
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """List the current user's invoices, most recent issue date first."""
    return await workflow.list_invoices(current_user)


@router.get("/{invoice_id}", response_model=InvoiceRecord)
async def get_invoice(
    invoice_id: int = Path(..., description="Invoice ID"),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    return await workflow.get_invoice(invoice_id, current_user)


@router.patch("/{invoice_id}/status", response_model=InvoiceRecord)
async def update_invoice_status(
    body: InvoiceStatusUpdate,
    invoice_id: int = Path(..., description="Invoice ID"),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """
    Change an invoice's status (owner or accountant).
    
    Returns 404 if the invoice does not exist, 403 if the caller is neither
    its owner nor an accountant.
    """
    return await workflow.update_invoice_status(invoice_id, body.status, current_user)
