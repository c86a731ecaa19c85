"""
Configuration module.

Usage:
    from bsa_discovery.config import load_settings

    settings = load_settings()
    print(settings.uploads.max_file_size_bytes)
"""

from bsa_discovery.config.models import (
    WizardSettings,
    UploadSettings,
    GenerationSettings,
    ExportSettings,
    SessionSettings,
)
from bsa_discovery.config.settings import load_settings

__all__ = [
    "WizardSettings",
    "UploadSettings",
    "GenerationSettings",
    "ExportSettings",
    "SessionSettings",
    "load_settings",
]
