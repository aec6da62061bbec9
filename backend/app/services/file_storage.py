"""
Upload storage for expense and document attachments.

Saves uploaded files on local disk under a random name and hands back the
reference stored on the record. File contents are never inspected.
"""

import logging
import uuid
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from backend.app.core.exceptions import InvalidInputError, ResourceNotFoundError
from backend.app.schemas.file import StoredFile

logger = logging.getLogger("finance.uploads")

URL_PREFIX = "/uploads/"


class LocalFileStorage:
    
    def __init__(self, root: str, max_bytes: int, allowed_types: Iterable[str]):
        self.root = Path(root)
        self.max_bytes = max_bytes
        self.allowed_types = set(allowed_types)
    
    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
    
    async def save(self, upload: UploadFile) -> StoredFile:
        """
        Store an uploaded file.
        
        Raises:
            InvalidInputError if the content type is not accepted or the file is too large
        """
        if upload.content_type not in self.allowed_types:
            raise InvalidInputError(
                "Unsupported file format. Please upload a PDF, JPG or PNG file.",
                details={"content_type": upload.content_type}
            )
        
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise InvalidInputError(
                "File too large",
                details={"max_bytes": self.max_bytes}
            )
        
        original_name = upload.filename or "upload"
        stored_name = f"{uuid.uuid4()}{Path(original_name).suffix.lower()}"
        
        self.ensure_root()
        (self.root / stored_name).write_bytes(content)
        logger.info("Stored upload", extra={"stored_name": stored_name, "size": len(content)})
        
        return StoredFile(file_url=f"{URL_PREFIX}{stored_name}", file_name=original_name)
    
    async def save_optional(self, upload: Optional[UploadFile]) -> Optional[StoredFile]:
        # Browsers send an empty part with no filename when no file was chosen
        if upload is None or not upload.filename:
            return None
        return await self.save(upload)
    
    def discard(self, stored_file: Optional[StoredFile]) -> None:
        """Remove a file saved for a submission that was not recorded."""
        if stored_file is None:
            return
        path = self.root / Path(stored_file.file_url).name
        path.unlink(missing_ok=True)
        logger.info("Discarded upload", extra={"stored_name": path.name})
    
    def resolve(self, stored_name: str) -> Path:
        """
        Path of a stored file.
        
        Raises:
            ResourceNotFoundError if the name is not a file directly under root
        """
        path = self.root / stored_name
        if Path(stored_name).name != stored_name or not path.is_file():
            raise ResourceNotFoundError("File", stored_name)
        return path
