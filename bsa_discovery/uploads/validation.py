"""
Candidate file validation for the upload drop zone.
"""

from typing import Optional

from bsa_discovery.config.models import UploadSettings
from bsa_discovery.exceptions import FileTooLargeError, InvalidFileTypeError
from bsa_discovery.uploads.models import FileHandle


def validate_file(file: FileHandle, settings: Optional[UploadSettings] = None) -> FileHandle:
    """
    Check a candidate file against the accepted types and the size limit.

    Type is checked first, so a large file with a bad extension is reported
    as a type error.

    Raises:
        InvalidFileTypeError: extension not in the accepted set
        FileTooLargeError: size above the configured limit
    """
    settings = settings or UploadSettings()
    if file.extension not in settings.accepted_extensions:
        raise InvalidFileTypeError(file.name)
    if file.size > settings.max_file_size_bytes:
        raise FileTooLargeError(file.name, settings.max_file_size_label)
    return file


def supported_types_hint(settings: Optional[UploadSettings] = None) -> str:
    """Drop-zone helper text, e.g. 'Supports PDF, DOCX, TXT, CSV, XLSX (max 10MB each)'."""
    settings = settings or UploadSettings()
    types = ", ".join(ext.upper() for ext in settings.accepted_extensions)
    return f"Supports {types} (max {settings.max_file_size_label} each)"
