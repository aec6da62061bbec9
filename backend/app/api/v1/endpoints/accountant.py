"""
Accountant API endpoints.

Cross-client views available only to accountants.
"""

from typing import List
from fastapi import APIRouter, Depends
from backend.app.core.dependencies import get_workflow
from backend.app.core.guards import require_accountant
from backend.app.schemas.document import DocumentRecord
from backend.app.schemas.user import UserRecord, UserResponse
from backend.app.services.workflow import WorkflowService

router = APIRouter(prefix="/accountant", tags=["Accountant"])


@router.get("/clients", response_model=List[UserResponse])
async def list_clients(
    current_user: UserRecord = Depends(require_accountant),
    workflow: WorkflowService = Depends(get_workflow)
):
    """
    List all client users ordered by name.
    
    Serialized through UserResponse, so password hashes are never returned.
    """
    clients = await workflow.list_clients(current_user)
    return [UserResponse.model_validate(c) for c in clients]


@router.get("/pending-documents", response_model=List[DocumentRecord])
async def list_pending_documents(
    current_user: UserRecord = Depends(require_accountant),
    workflow: WorkflowService = Depends(get_workflow)
):
    """Documents awaiting review across all clients, newest first."""
    return await workflow.pending_documents(current_user)
