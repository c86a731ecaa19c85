"""
Tests for bsa_discovery/questionnaire/exporter.py

- export_as_word: .docx bytes readable by python-docx
- export_as_pdf: styled HTML for print-to-PDF
- export_as_json: project + questionnaire payload
- _safe_filename, _escape, _md_to_html, _inline helpers

All functions are pure (models in -> bytes/string out), NO mocks needed.
"""

import io
import json

import docx
import pytest

from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.questionnaire.exporter import (
    EXPORTERS,
    _escape,
    _inline,
    _md_to_html,
    _safe_filename,
    export_as_json,
    export_as_pdf,
    export_as_word,
    to_markdown,
)


class TestSafeFilename:
    def test_project_name_used(self):
        assert _safe_filename("Acme Portal") == "Acme Portal"

    def test_special_chars_stripped(self):
        assert _safe_filename('Acme "Portal" <v2>') == "Acme Portal v2"

    def test_truncated_to_30_chars(self):
        assert len(_safe_filename("A" * 50)) == 30

    def test_empty_defaults_to_questionnaire(self):
        assert _safe_filename("") == "questionnaire"
        assert _safe_filename("!@#$") == "questionnaire"


class TestMarkdown:
    def test_sections_numbered(self, small_questionnaire, acme_project):
        md = to_markdown(small_questionnaire, acme_project)
        assert md.startswith("# Discovery Questionnaire - Acme Portal")
        assert "## 1. Business Overview" in md
        assert "## 2. Data Management" in md
        assert "2. Who sponsors the project?" in md

    def test_labels_used_for_type_and_timeline(self, small_questionnaire, acme_project):
        md = to_markdown(small_questionnaire, acme_project)
        assert "- **Type:** System Integration" in md
        assert "- **Timeline:** 3-6 months" in md


class TestExportWord:
    def test_returns_docx(self, small_questionnaire, acme_project):
        content, filename = export_as_word(small_questionnaire, acme_project)
        assert content[:2] == b"PK"
        assert filename == "Acme Portal.docx"

    def test_docx_contains_questions(self, small_questionnaire, acme_project):
        content, _ = export_as_word(small_questionnaire, acme_project)
        document = docx.Document(io.BytesIO(content))
        texts = [p.text for p in document.paragraphs]
        assert "Discovery Questionnaire - Acme Portal" in texts
        assert "1. Business Overview" in texts
        assert "1.2 Who sponsors the project?" in texts
        assert "2.1 Where does customer data live today?" in texts


class TestExportPdf:
    def test_returns_html(self, small_questionnaire, acme_project):
        content, filename = export_as_pdf(small_questionnaire, acme_project)
        html = content.decode("utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "window.print()" in html
        assert "<h2>1. Business Overview</h2>" in html
        assert "<li>Who sponsors the project?</li>" in html
        assert filename == "Acme Portal.html"

    def test_title_is_escaped(self, acme_project):
        from bsa_discovery.questionnaire.models import Questionnaire

        content, _ = export_as_pdf(Questionnaire(title="<script>x</script>"), acme_project)
        assert b"<script>x</script>" not in content


class TestExportJson:
    def test_payload(self, small_questionnaire, acme_project):
        content, filename = export_as_json(small_questionnaire, acme_project)
        payload = json.loads(content)
        assert payload["project"]["name"] == "Acme Portal"
        assert payload["project"]["type"] == "integration"
        assert len(payload["questionnaire"]["sections"]) == 2
        assert payload["questionnaire"]["sections"][0]["questions"][1]["id"] == "bo-2"
        assert filename == "Acme Portal.json"

    def test_registry_covers_three_formats(self):
        assert set(EXPORTERS) == {"word", "pdf", "json"}


class TestHtmlHelpers:
    def test_escape(self):
        assert _escape('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"

    def test_inline_bold_and_italic(self):
        assert _inline("**bold** and *it*") == "<strong>bold</strong> and <em>it</em>"

    def test_empty_markdown(self):
        assert _md_to_html("") == "<p>Questionnaire is empty</p>"

    def test_lists_are_closed(self):
        html = _md_to_html("- a\n- b\n\n1. one\n2. two")
        assert html == "<ul>\n<li>a</li>\n<li>b</li>\n</ul>\n<ol>\n<li>one</li>\n<li>two</li>\n</ol>"

    @pytest.mark.parametrize("heading,tag", [("# T", "h1"), ("## T", "h2")])
    def test_headings(self, heading, tag):
        assert _md_to_html(heading) == f"<{tag}>T</{tag}>"
