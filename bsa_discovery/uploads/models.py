"""
Pydantic models for simulated document uploads.

UploadEntry tracks one accepted file through the fabricated
uploading → processing → complete sequence.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UploadStatus(str, Enum):
    """Per-file upload status."""
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"            # Declared for the UI; the progress timer never assigns it


STATUS_LABELS = {
    UploadStatus.UPLOADING: "Uploading...",
    UploadStatus.PROCESSING: "Processing...",
    UploadStatus.COMPLETE: "Complete",
    UploadStatus.ERROR: "Error",
}

STATUS_COLORS = {
    UploadStatus.UPLOADING: "primary",
    UploadStatus.PROCESSING: "warning",
    UploadStatus.COMPLETE: "success",
    UploadStatus.ERROR: "destructive",
}


class FileHandle(BaseModel):
    """A raw file as delivered by the drop zone or the file picker."""

    name: str = Field(..., description="Original file name")
    size: int = Field(..., ge=0, description="Size in bytes")
    content_type: Optional[str] = Field(default=None, description="MIME type reported by the browser")

    @property
    def extension(self) -> str:
        """Lower-cased suffix after the last '.', empty when there is none."""
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[1].lower()

    @property
    def size_label(self) -> str:
        return f"{self.size / 1024 / 1024:.1f} MB"


class UploadEntry(BaseModel):
    """Simulated upload state for one accepted file."""

    id: str
    file: FileHandle
    status: UploadStatus = UploadStatus.UPLOADING
    progress: int = Field(default=0, ge=0, le=100)

    def to_view(self) -> dict:
        """Render-ready dict for the upload list."""
        return {
            "id": self.id,
            "name": self.file.name,
            "size": self.file.size_label,
            "status": self.status.value,
            "status_label": STATUS_LABELS[self.status],
            "status_color": STATUS_COLORS[self.status],
            "progress": self.progress,
        }
