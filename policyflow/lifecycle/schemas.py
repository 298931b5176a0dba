"""Input payloads accepted by lifecycle operations"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FileUpload(BaseModel):
    """File metadata handed to attach_files (content itself is not stored)"""
    name: str
    size_bytes: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = None

    model_config = ConfigDict(frozen=True)
