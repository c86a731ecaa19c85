"""
Unit tests for the simulated questionnaire generator and its YAML bank.
"""

from datetime import datetime

import pytest

from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.questionnaire import (
    Question,
    QuestionBank,
    QuestionnaireGenerator,
    QuestionType,
    compute_total_questions,
)


@pytest.fixture
def generator():
    return QuestionnaireGenerator()


class TestQuestionBank:
    def test_bundled_bank_has_every_area(self):
        from bsa_discovery.areas import TOPIC_AREAS

        bank = QuestionBank()
        for area in TOPIC_AREAS:
            assert bank.area(area.id)["questions"], area.id

    def test_missing_file_falls_back_to_base_sections(self, tmp_path):
        bank = QuestionBank(tmp_path / "missing.yaml")
        titles = [s["title"] for s in bank.base_sections()]
        assert titles == ["Business Overview", "Current State Analysis"]
        assert bank.area("data-management") == {}

    def test_broken_yaml_falls_back(self, tmp_path):
        path = tmp_path / "bank.yaml"
        path.write_text("base_sections: [unclosed", encoding="utf-8")
        bank = QuestionBank(path)
        assert len(bank.base_sections()) == 2

    def test_results_are_cached_until_reload(self, tmp_path):
        path = tmp_path / "bank.yaml"
        path.write_text("timelines:\n  1-3-months: first\n", encoding="utf-8")
        bank = QuestionBank(path)
        assert bank.timeline_question("1-3-months") == "first"
        path.write_text("timelines:\n  1-3-months: second\n", encoding="utf-8")
        assert bank.timeline_question("1-3-months") == "first"
        bank.reload()
        assert bank.timeline_question("1-3-months") == "second"


class TestGenerate:
    def test_title_uses_project_name(self, generator):
        project = ProjectConfiguration(name="Acme Portal", client="Acme Corp")
        result = generator.generate(project)
        assert result.title == "Discovery Questionnaire - Acme Portal"
        assert result.description == "Prepared for Acme Corp"

    def test_base_sections_always_present(self, generator):
        result = generator.generate(ProjectConfiguration(name="X", client="Y"))
        assert [s.title for s in result.sections] == ["Business Overview", "Current State Analysis"]
        assert all(len(s.questions) == 3 for s in result.sections)

    def test_type_timeline_and_context_add_questions(self, generator, acme_project):
        result = generator.generate(acme_project)
        overview, current_state = result.sections[0], result.sections[1]
        assert "Which systems must exchange data, and in which direction?" in overview.questions
        assert len(overview.questions) == 5
        assert "Which milestones must be reached before the halfway point?" in current_state.questions

    def test_one_section_per_selected_area(self, generator, acme_project):
        project = acme_project.model_copy(update={"selected_areas": ["infrastructure", "data-management"]})
        result = generator.generate(project)
        assert [s.title for s in result.sections[2:]] == ["Infrastructure", "Data Management"]

    def test_area_questions_are_typed_with_ids(self, generator, acme_project):
        section = generator.generate(acme_project).sections[2]
        assert all(isinstance(q, Question) for q in section.questions)
        assert [q.id for q in section.questions] == [
            "data-management-1",
            "data-management-2",
            "data-management-3",
        ]
        assert section.questions[1].type is QuestionType.SCALE

    def test_unknown_area_skipped(self, generator):
        project = ProjectConfiguration(name="X", client="Y", selected_areas=["not-an-area"])
        assert len(generator.generate(project).sections) == 2

    def test_documents_section_only_with_ai(self, generator, acme_project):
        without_ai = generator.generate(acme_project, ["brief.pdf"])
        assert "Document Insights" not in [s.title for s in without_ai.sections]
        assert without_ai.metadata.document_names == []

        with_ai = generator.generate(acme_project.model_copy(update={"ai_enabled": True}), ["brief.pdf"])
        insights = with_ai.sections[-1]
        assert insights.title == "Document Insights"
        assert "brief.pdf" in insights.questions[0]

    def test_metadata(self, generator, acme_project):
        stamp = datetime(2024, 5, 1, 12, 0)
        result = generator.generate(acme_project, generated_at=stamp)
        assert result.metadata.generated_at == stamp
        assert result.metadata.total_questions == compute_total_questions(result)
        assert result.metadata.area_ids == ["data-management"]
