"""
QuestionBank - loads template questions from YAML.

The bundled question_bank.yaml holds base sections, per-area questions and
hints keyed by project type and timeline. If the file is missing or
unreadable the two fixed base sections are still available, so generation
always produces a usable questionnaire.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml

logger = structlog.get_logger("config")

DEFAULT_BANK_PATH = Path(__file__).parent / "question_bank.yaml"

FALLBACK_BASE_SECTIONS: List[Dict[str, Any]] = [
    {
        "title": "Business Overview",
        "questions": [
            "What are the primary business objectives for this project?",
            "How does this initiative align with your strategic goals?",
            "What specific challenges are you hoping to address?",
        ],
    },
    {
        "title": "Current State Analysis",
        "questions": [
            "What systems and processes are currently in place?",
            "What are the main pain points in your existing workflow?",
            "How do stakeholders currently interact with these systems?",
        ],
    },
]


class QuestionBank:
    """Lazy, cached view over the question bank YAML."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_BANK_PATH
        self._cache: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._cache is not None:
            return self._cache

        if not self.path.exists():
            logger.warning("question_bank_not_found", path=str(self.path))
            self._cache = {}
            return self._cache

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("question_bank_load_failed", path=str(self.path), error=str(e))
            data = {}

        if not isinstance(data, dict):
            logger.error("question_bank_invalid", path=str(self.path), type=type(data).__name__)
            data = {}

        self._cache = data
        logger.info(
            "question_bank_loaded",
            path=str(self.path),
            areas=len(data.get("areas") or {}),
        )
        return self._cache

    def reload(self) -> None:
        self._cache = None

    def base_sections(self) -> List[Dict[str, Any]]:
        return self._load().get("base_sections") or FALLBACK_BASE_SECTIONS

    def area(self, area_id: str) -> Dict[str, Any]:
        return (self._load().get("areas") or {}).get(area_id) or {}

    def project_type_question(self, project_type: str) -> Optional[str]:
        return (self._load().get("project_types") or {}).get(project_type)

    def timeline_question(self, timeline: str) -> Optional[str]:
        return (self._load().get("timelines") or {}).get(timeline)

    def documents(self) -> Dict[str, Any]:
        return self._load().get("documents") or {}
