"""
Pydantic schemas for the generated discovery questionnaire.

A Questionnaire is produced wholesale by the generator and never edited
afterwards; the next generation replaces it.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple-choice"
    SCALE = "scale"
    YES_NO = "yes-no"


class Question(BaseModel):
    """A question with an optional id and answer type."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(default=None, description="Stable question id, e.g. 'data-management-2'")
    text: str = Field(..., description="Question wording")
    type: Optional[QuestionType] = Field(default=None, description="Expected answer type")


# Sections may hold plain strings or Question objects
QuestionItem = Union[str, Question]


class Section(BaseModel):
    """An ordered group of questions under one heading."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: Optional[str] = None
    questions: List[QuestionItem] = Field(default_factory=list)


class QuestionnaireMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    generated_at: Optional[datetime] = None
    total_questions: Optional[int] = None
    area_ids: List[str] = Field(default_factory=list)
    document_names: List[str] = Field(default_factory=list)


class Questionnaire(BaseModel):
    """The generated artifact: title plus ordered sections."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: Optional[str] = None
    sections: List[Section] = Field(default_factory=list)
    metadata: QuestionnaireMetadata = Field(default_factory=QuestionnaireMetadata)
