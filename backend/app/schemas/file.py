"""
Reference to a file saved by the upload storage.
"""

from pydantic import BaseModel


class StoredFile(BaseModel):
    file_url: str
    file_name: str
