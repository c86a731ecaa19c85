"""
Topic area catalog.

Static, immutable entries referenced by id from
ProjectConfiguration.selected_areas.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class TopicArea(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    color: str


TOPIC_AREAS: List[TopicArea] = [
    TopicArea(
        id="business-process",
        name="Business Process",
        description="Current workflows, procedures, and business rules",
        icon="🔄",
        color="from-blue-500 to-purple-500",
    ),
    TopicArea(
        id="data-management",
        name="Data Management",
        description="Data sources, quality, governance, and flow",
        icon="📊",
        color="from-green-500 to-blue-500",
    ),
    TopicArea(
        id="system-integration",
        name="System Integration",
        description="API connections, data exchange, and interfaces",
        icon="🔗",
        color="from-purple-500 to-pink-500",
    ),
    TopicArea(
        id="user-experience",
        name="User Experience",
        description="User needs, workflows, and interface requirements",
        icon="👥",
        color="from-orange-500 to-red-500",
    ),
    TopicArea(
        id="security-compliance",
        name="Security & Compliance",
        description="Security requirements, regulations, and standards",
        icon="🔒",
        color="from-red-500 to-purple-500",
    ),
    TopicArea(
        id="performance-scaling",
        name="Performance & Scaling",
        description="Load requirements, performance metrics, scalability",
        icon="⚡",
        color="from-yellow-500 to-orange-500",
    ),
    TopicArea(
        id="infrastructure",
        name="Infrastructure",
        description="Hardware, hosting, deployment, and maintenance",
        icon="🏗️",
        color="from-gray-500 to-blue-500",
    ),
    TopicArea(
        id="change-management",
        name="Change Management",
        description="Training, adoption, communication, and transition",
        icon="🔄",
        color="from-teal-500 to-green-500",
    ),
]

_BY_ID: Dict[str, TopicArea] = {area.id: area for area in TOPIC_AREAS}


def get_area(area_id: str) -> Optional[TopicArea]:
    return _BY_ID.get(area_id)


def is_known_area(area_id: str) -> bool:
    return area_id in _BY_ID


def selected_area_badges(area_ids: List[str]) -> List[str]:
    """'{icon} {name}' labels for the selected-areas summary, unknown ids skipped."""
    return [f"{a.icon} {a.name}" for a in (get_area(i) for i in area_ids) if a]
