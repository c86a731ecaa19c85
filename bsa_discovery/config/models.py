"""
Pydantic models for wizard configuration.

Defines the schema for upload limits, simulated delays and session
housekeeping loaded from config/wizard.yaml.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator


class UploadSettings(BaseModel):
    """Document upload validation and simulated progress."""

    accepted_extensions: List[str] = Field(
        default_factory=lambda: ["pdf", "docx", "txt", "csv", "xlsx"],
        description="Accepted file extensions, without the leading dot",
    )
    max_file_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="Per-file size limit")
    tick_interval_ms: int = Field(default=200, gt=0, description="Progress tick interval")
    progress_step: int = Field(default=10, gt=0, le=100, description="Progress added per tick")

    @field_validator("accepted_extensions")
    @classmethod
    def normalize_extensions(cls, v):
        """Store extensions lower-cased and without dots."""
        return [ext.lower().lstrip(".") for ext in v if ext and ext.strip(".")]

    @property
    def max_file_size_label(self) -> str:
        """Human label used in rejection notices (e.g. '10MB')."""
        mb = self.max_file_size_bytes / (1024 * 1024)
        return f"{mb:g}MB"


class GenerationSettings(BaseModel):
    """Simulated questionnaire generation."""

    delay_ms: int = Field(default=3000, ge=0, description="Fabricated generation delay")


class ExportSettings(BaseModel):
    """Simulated export announcement."""

    delay_ms: int = Field(default=2000, ge=0, description="Delay before 'Export Complete'")


class SessionSettings(BaseModel):
    """In-memory session housekeeping."""

    idle_ttl_seconds: int = Field(default=3600, gt=0, description="Evict sessions idle this long")
    cleanup_interval_seconds: int = Field(default=300, gt=0, description="Eviction loop period")
    max_sessions: int = Field(default=1000, gt=0, description="Cap on concurrent sessions")


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO")


class WizardSettings(BaseModel):
    """Top-level configuration combining every section."""

    uploads: UploadSettings = Field(default_factory=UploadSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    sessions: SessionSettings = Field(default_factory=SessionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
