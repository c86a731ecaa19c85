"""
QuestionnaireGenerator - synthesises a questionnaire from the project.

Nothing is analysed: the result is assembled from the question bank and
keyed loosely off the project configuration (name in the title, hints for
type and timeline, one section per selected topic area, one section for
uploaded documents when AI enhancement is on).
"""

from datetime import datetime
from typing import Any, Iterable, List, Optional

import structlog

from bsa_discovery.areas import get_area
from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.questionnaire.bank import QuestionBank
from bsa_discovery.questionnaire.models import (
    Question,
    QuestionItem,
    Questionnaire,
    QuestionnaireMetadata,
    Section,
)

logger = structlog.get_logger("questionnaire")

MAX_DOCUMENT_QUESTIONS = 5


def questionnaire_title(project_name: str) -> str:
    return f"Discovery Questionnaire - {project_name}"


class QuestionnaireGenerator:
    """Builds Questionnaire objects from templates."""

    def __init__(self, bank: Optional[QuestionBank] = None):
        self.bank = bank or QuestionBank()

    def generate(
        self,
        project: ProjectConfiguration,
        document_names: Iterable[str] = (),
        generated_at: Optional[datetime] = None,
    ) -> Questionnaire:
        """
        Assemble the questionnaire.

        Args:
            project: Snapshot of the configuration when generation started.
            document_names: Names of uploaded files (used only when
                project.ai_enabled is set).
            generated_at: Timestamp override for deterministic output.

        Returns:
            A frozen Questionnaire with at least the base sections.
        """
        documents = list(document_names) if project.ai_enabled else []

        sections = self._base_sections(project)
        for area_id in project.selected_areas:
            section = self._area_section(area_id)
            if section is not None:
                sections.append(section)
        if documents:
            sections.append(self._documents_section(documents))

        total = sum(len(s.questions) for s in sections)
        questionnaire = Questionnaire(
            title=questionnaire_title(project.name),
            description=self._description(project),
            sections=sections,
            metadata=QuestionnaireMetadata(
                generated_at=generated_at or datetime.now(),
                total_questions=total,
                area_ids=list(project.selected_areas),
                document_names=documents,
            ),
        )
        logger.info(
            "questionnaire_generated",
            title=questionnaire.title,
            sections=len(sections),
            questions=total,
            areas=len(project.selected_areas),
            documents=len(documents),
        )
        return questionnaire

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _base_sections(self, project: ProjectConfiguration) -> List[Section]:
        raw_sections = self.bank.base_sections()
        sections = []
        for index, raw in enumerate(raw_sections):
            questions = [self._to_item(q) for q in raw.get("questions", [])]
            if index == 0:
                hint = self.bank.project_type_question(project.type_value)
                if hint:
                    questions.append(hint)
                if project.context.strip():
                    questions.append(
                        "Based on the context you shared, which aspects are most "
                        "critical to address first?"
                    )
            if index == 1:
                hint = self.bank.timeline_question(project.timeline_value)
                if hint:
                    questions.append(hint)
            sections.append(
                Section(
                    title=raw.get("title", f"Section {index + 1}"),
                    description=raw.get("description"),
                    questions=questions,
                )
            )
        return sections

    def _area_section(self, area_id: str) -> Optional[Section]:
        area = get_area(area_id)
        if area is None:
            logger.warning("questionnaire_unknown_area", area_id=area_id)
            return None

        template = self.bank.area(area_id)
        questions: List[QuestionItem] = []
        for n, raw in enumerate(template.get("questions", []), start=1):
            item = self._to_item(raw)
            if isinstance(item, Question) and item.id is None:
                item = item.model_copy(update={"id": f"{area_id}-{n}"})
            questions.append(item)
        if not questions:
            questions.append(f"What are your main goals for {area.name.lower()}?")

        return Section(
            title=area.name,
            description=template.get("description") or area.description,
            questions=questions,
        )

    def _documents_section(self, documents: List[str]) -> Section:
        template = self.bank.documents()
        per_document = template.get(
            "per_document", "Which points in {document} still need confirmation from stakeholders?"
        )
        questions: List[QuestionItem] = [
            per_document.format(document=name) for name in documents[:MAX_DOCUMENT_QUESTIONS]
        ]
        closing = template.get("closing")
        if closing:
            questions.append(closing)
        return Section(
            title=template.get("title", "Document Insights"),
            description=template.get("description"),
            questions=questions,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _to_item(raw: Any) -> QuestionItem:
        if isinstance(raw, dict):
            return Question(**raw)
        return str(raw)

    @staticmethod
    def _description(project: ProjectConfiguration) -> Optional[str]:
        if not project.client.strip():
            return None
        return f"Prepared for {project.client}"
