"""
Serves stored attachments to authenticated users.
"""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import FileResponse
from backend.app.core.dependencies import get_current_user, get_file_storage
from backend.app.schemas.user import UserRecord
from backend.app.services.file_storage import LocalFileStorage

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.get("/{stored_name}")
async def download_upload(
    stored_name: str = Path(...),
    current_user: UserRecord = Depends(get_current_user),
    file_storage: LocalFileStorage = Depends(get_file_storage)
):
    return FileResponse(file_storage.resolve(stored_name))
