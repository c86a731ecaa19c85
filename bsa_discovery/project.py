"""
Project configuration captured by the first two wizard steps.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ProjectType(str, Enum):
    SYSTEM_IMPLEMENTATION = "system-implementation"
    PROCESS_IMPROVEMENT = "process-improvement"
    DIGITAL_TRANSFORMATION = "digital-transformation"
    INTEGRATION = "integration"
    MODERNIZATION = "modernization"

    @property
    def label(self) -> str:
        return PROJECT_TYPE_LABELS[self]


class Timeline(str, Enum):
    ONE_TO_THREE_MONTHS = "1-3-months"
    THREE_TO_SIX_MONTHS = "3-6-months"
    SIX_TO_TWELVE_MONTHS = "6-12-months"
    TWELVE_PLUS_MONTHS = "12-plus-months"

    @property
    def label(self) -> str:
        return TIMELINE_LABELS[self]


PROJECT_TYPE_LABELS = {
    ProjectType.SYSTEM_IMPLEMENTATION: "System Implementation",
    ProjectType.PROCESS_IMPROVEMENT: "Process Improvement",
    ProjectType.DIGITAL_TRANSFORMATION: "Digital Transformation",
    ProjectType.INTEGRATION: "System Integration",
    ProjectType.MODERNIZATION: "Legacy Modernization",
}

TIMELINE_LABELS = {
    Timeline.ONE_TO_THREE_MONTHS: "1-3 months",
    Timeline.THREE_TO_SIX_MONTHS: "3-6 months",
    Timeline.SIX_TO_TWELVE_MONTHS: "6-12 months",
    Timeline.TWELVE_PLUS_MONTHS: "12+ months",
}


class ProjectConfiguration(BaseModel):
    """
    Everything the user entered about the discovery project.

    Created empty at session start and mutated field by field.
    """

    name: str = Field(default="", max_length=200, description="Project name")
    client: str = Field(default="", max_length=200, description="Client / organization")
    type: Optional[ProjectType] = Field(default=None, description="Project type")
    timeline: Optional[Timeline] = Field(default=None, description="Expected timeline")
    context: str = Field(default="", max_length=5000, description="Additional free-text context")
    ai_enabled: bool = Field(default=False, description="AI-enhanced analysis (enables document upload)")
    selected_areas: List[str] = Field(default_factory=list, description="Selected topic-area ids")

    @field_validator("selected_areas")
    @classmethod
    def dedupe_areas(cls, v):
        """Selection is a set; keep first-seen order for display."""
        unique = []
        for area_id in v:
            if area_id not in unique:
                unique.append(area_id)
        return unique

    @property
    def type_value(self) -> str:
        return self.type.value if self.type else ""

    @property
    def timeline_value(self) -> str:
        return self.timeline.value if self.timeline else ""

    def missing_basics(self) -> List[str]:
        """Required step-1 fields that are still empty."""
        missing = []
        if not self.name:
            missing.append("name")
        if not self.client:
            missing.append("client")
        return missing
