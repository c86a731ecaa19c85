"""Questionnaire generation, rendering and export."""

from bsa_discovery.questionnaire.bank import QuestionBank
from bsa_discovery.questionnaire.generator import QuestionnaireGenerator, questionnaire_title
from bsa_discovery.questionnaire.models import (
    Question,
    QuestionItem,
    Questionnaire,
    QuestionnaireMetadata,
    QuestionType,
    Section,
)
from bsa_discovery.questionnaire.renderer import (
    ExportJob,
    ExportStatus,
    QuestionnaireRenderer,
    build_view,
    compute_total_questions,
    question_text,
    to_plain_text,
)

__all__ = [
    "ExportJob",
    "ExportStatus",
    "Question",
    "QuestionBank",
    "QuestionItem",
    "QuestionType",
    "Questionnaire",
    "QuestionnaireGenerator",
    "QuestionnaireMetadata",
    "QuestionnaireRenderer",
    "Section",
    "build_view",
    "compute_total_questions",
    "question_text",
    "questionnaire_title",
    "to_plain_text",
]
