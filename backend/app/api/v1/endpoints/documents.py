"""
Supporting document endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from backend.app.core.dependencies import get_current_user, get_file_storage, get_workflow
from backend.app.models.enums import DocumentType
from backend.app.schemas.document import DocumentCreate, DocumentRecord
from backend.app.schemas.expense import ReviewStatusUpdate
from backend.app.schemas.user import UserRecord
from backend.app.services.file_storage import LocalFileStorage
from backend.app.services.workflow import WorkflowService

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.post("", response_model=DocumentRecord, status_code=status.HTTP_201_CREATED)
async def submit_document(
    type: DocumentType = Form(...),
    title: str = Form(..., min_length=1, max_length=200),
    notes: Optional[str] = Form(None, max_length=1000),
    file: UploadFile = File(...),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
    file_storage: LocalFileStorage = Depends(get_file_storage)
):
    """Upload a document for review. A file is required."""
    document_data = DocumentCreate(type=type, title=title, notes=notes)
    stored_file = await file_storage.save(file)
    try:
        return await workflow.submit_document(current_user, document_data, stored_file)
    except Exception:
        file_storage.discard(stored_file)
        raise


@router.get("", response_model=List[DocumentRecord])
async def list_documents(
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """List the current user's documents, newest upload first."""
    return await workflow.list_documents(current_user)


@router.get("/{document_id}", response_model=DocumentRecord)
async def get_document(
    document_id: int = Path(..., description="Document ID"),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    return await workflow.get_document(document_id, current_user)


@router.patch("/{document_id}/status", response_model=DocumentRecord)
async def review_document(
    body: ReviewStatusUpdate,
    document_id: int = Path(..., description="Document ID"),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """Validate or reject a document (accountant only)."""
    return await workflow.update_document_status(document_id, body.status, current_user)
