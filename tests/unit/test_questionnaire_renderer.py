"""
Unit tests for bsa_discovery/questionnaire/renderer.py.

Plain-text copy, question counting, the preview view model, clipboard
notices and the simulated export jobs (2 s delay on a ManualScheduler).
"""

import json

import pytest

from bsa_discovery.exceptions import ClipboardWriteError, UnsupportedExportFormatError
from bsa_discovery.notices import NoticeVariant
from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.questionnaire import renderer as renderer_module
from bsa_discovery.questionnaire.models import Question, Questionnaire, Section
from bsa_discovery.questionnaire.renderer import (
    ExportStatus,
    QuestionnaireRenderer,
    build_view,
    compute_total_questions,
    question_text,
    to_plain_text,
)


@pytest.fixture
def renderer(scheduler, notices):
    return QuestionnaireRenderer(scheduler, notices=notices, session_id="abcd1234")


class TestQuestionCounting:
    @pytest.mark.parametrize("counts", [[], [0], [3], [3, 1, 4], [0, 2, 0, 5]])
    def test_total_is_sum_of_section_counts(self, counts):
        questionnaire = Questionnaire(
            title="T",
            sections=[Section(title=f"S{i}", questions=["q"] * c) for i, c in enumerate(counts)],
        )
        assert compute_total_questions(questionnaire) == sum(counts)

    def test_question_text_for_both_shapes(self):
        assert question_text("plain") == "plain"
        assert question_text(Question(text="object")) == "object"


class TestPlainText:
    def test_exact_format(self, small_questionnaire):
        project = ProjectConfiguration(name="Acme Portal", client="Acme Corp")
        expected = (
            "Discovery Questionnaire - Acme Portal\n"
            "\n"
            "Project: Acme Portal\n"
            "Client: Acme Corp\n"
            "Type: \n"
            "Timeline: \n"
            "\n"
            "1. Business Overview\n"
            "Goals and drivers\n"
            "\n"
            "1.1 What are the primary business objectives for this project?\n"
            "1.2 Who sponsors the project?\n"
            "\n"
            "2. Data Management\n"
            "\n"
            "2.1 Where does customer data live today?\n"
            "\n"
        )
        assert to_plain_text(small_questionnaire, project) == expected

    def test_type_and_timeline_are_raw_values(self, small_questionnaire, acme_project):
        text = to_plain_text(small_questionnaire, acme_project)
        assert "Type: integration\n" in text
        assert "Timeline: 3-6-months\n" in text

    def test_numbering_matches_position(self, acme_project):
        questionnaire = Questionnaire(
            title="T",
            sections=[Section(title=f"S{i}", questions=[f"q{i}-{j}" for j in range(4)]) for i in range(3)],
        )
        lines = to_plain_text(questionnaire, acme_project).splitlines()
        for i in range(3):
            for j in range(4):
                assert f"{i + 1}.{j + 1} q{i}-{j}" in lines


class TestBuildView:
    def test_view_counts_and_footer(self, small_questionnaire, acme_project):
        view = build_view(small_questionnaire, acme_project)
        assert view["section_count"] == 2
        assert view["question_count"] == 3
        assert view["footer"] == "3 questions across 2 sections"
        assert view["ai_enhanced"] is False
        assert view["sections"][0]["questions"][1] == {"number": "1.2", "text": "Who sponsors the project?"}

    def test_ai_badge(self, small_questionnaire, acme_project):
        project = acme_project.model_copy(update={"ai_enabled": True})
        assert build_view(small_questionnaire, project)["ai_enhanced"] is True


class TestClipboard:
    def test_copy_writes_text_and_posts_notice(self, renderer, notices, small_questionnaire, acme_project):
        written = []
        content = renderer.copy_to_clipboard(small_questionnaire, acme_project, written.append)
        assert written == [content]
        assert content.startswith("Discovery Questionnaire - Acme Portal\n")
        notice = notices.peek()[-1]
        assert notice.title == "Copied to Clipboard"
        assert notice.description == "Questionnaire content has been copied."

    def test_copy_failure(self, renderer, notices, small_questionnaire, acme_project):
        def denied(_):
            raise PermissionError("clipboard blocked")

        with pytest.raises(ClipboardWriteError):
            renderer.copy_to_clipboard(small_questionnaire, acme_project, denied)
        notice = notices.peek()[-1]
        assert notice.title == "Copy failed"
        assert notice.variant is NoticeVariant.DESTRUCTIVE


class TestExport:
    @pytest.mark.parametrize("fmt", ["word", "pdf", "json"])
    def test_export_notices_and_bytes(self, renderer, scheduler, notices, small_questionnaire, acme_project, fmt):
        job = renderer.export(small_questionnaire, acme_project, fmt)

        started = notices.drain()
        assert [(n.title, n.description) for n in started] == [
            ("Export Started", f"Generating {fmt.upper()} document...")
        ]
        assert job.status is ExportStatus.RUNNING

        scheduler.advance(1.999)
        assert job.status is ExportStatus.RUNNING
        assert notices.drain() == []

        scheduler.advance(0.01)
        assert job.status is ExportStatus.COMPLETE
        assert job.content
        completed = notices.drain()
        assert [(n.title, n.description) for n in completed] == [
            ("Export Complete", f"Your questionnaire has been exported as {fmt.upper()}.")
        ]

    def test_json_export_content(self, renderer, scheduler, small_questionnaire, acme_project):
        job = renderer.export(small_questionnaire, acme_project, "json")
        scheduler.advance(2.0)
        payload = json.loads(job.content)
        assert payload["questionnaire"]["title"] == small_questionnaire.title
        assert job.filename == "Acme Portal.json"

    def test_format_is_case_insensitive(self, renderer, small_questionnaire, acme_project):
        assert renderer.export(small_questionnaire, acme_project, "PDF").format == "pdf"

    def test_unsupported_format(self, renderer, notices, small_questionnaire, acme_project):
        with pytest.raises(UnsupportedExportFormatError):
            renderer.export(small_questionnaire, acme_project, "xml")
        assert len(notices) == 0

    def test_reexport_cancels_previous(self, renderer, scheduler, small_questionnaire, acme_project):
        first = renderer.export(small_questionnaire, acme_project, "word")
        second = renderer.export(small_questionnaire, acme_project, "word")
        assert first.status is ExportStatus.CANCELLED
        scheduler.advance(2.0)
        assert second.status is ExportStatus.COMPLETE
        assert renderer.get_export("word") is second

    def test_exporter_failure(self, renderer, scheduler, notices, small_questionnaire, acme_project, monkeypatch):
        def broken(questionnaire, project):
            raise ValueError("disk full")

        monkeypatch.setitem(renderer_module.EXPORTERS, "json", broken)
        job = renderer.export(small_questionnaire, acme_project, "json")
        scheduler.advance(2.0)
        assert job.status is ExportStatus.FAILED
        assert job.error == "disk full"
        notice = notices.peek()[-1]
        assert notice.title == "Export Failed"
        assert notice.variant is NoticeVariant.DESTRUCTIVE

    def test_close_cancels_running_exports(self, renderer, scheduler, small_questionnaire, acme_project):
        renderer.export(small_questionnaire, acme_project, "word")
        renderer.export(small_questionnaire, acme_project, "json")
        assert renderer.close() == 2
        assert scheduler.pending == 0

    def test_get_export_before_start(self, renderer):
        assert renderer.get_export("json") is None
        with pytest.raises(UnsupportedExportFormatError):
            renderer.get_export("xml")
