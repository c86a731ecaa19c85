"""
Simulated document upload module.

Usage:
    from bsa_discovery.uploads import UploadSimulator, FileHandle

    sim = UploadSimulator(scheduler)
    sim.submit([FileHandle(name="brief.pdf", size=2_000_000)])
"""

from bsa_discovery.uploads.models import (
    FileHandle,
    UploadEntry,
    UploadStatus,
    STATUS_LABELS,
    STATUS_COLORS,
)
from bsa_discovery.uploads.simulator import UploadSimulator
from bsa_discovery.uploads.validation import validate_file, supported_types_hint

__all__ = [
    "FileHandle",
    "UploadEntry",
    "UploadStatus",
    "STATUS_LABELS",
    "STATUS_COLORS",
    "UploadSimulator",
    "validate_file",
    "supported_types_hint",
]
