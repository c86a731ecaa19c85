"""
Questionnaire Exporter - Word, print-ready HTML (for PDF) and JSON.

Each exporter takes the questionnaire plus the project it was generated for
and returns (content_bytes, filename).
"""

import io
import json
import re
from typing import Callable, Dict, Tuple

import docx
from docx.shared import Pt

from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.questionnaire.models import Questionnaire, QuestionItem

ExportResult = Tuple[bytes, str]


def _safe_filename(project_name: str) -> str:
    safe_name = "".join(c for c in project_name if c.isalnum() or c in " _-")[:30].strip()
    return safe_name or "questionnaire"


def _question_text(question: QuestionItem) -> str:
    return question if isinstance(question, str) else question.text


def to_markdown(questionnaire: Questionnaire, project: ProjectConfiguration) -> str:
    """Render the questionnaire as simple markdown (headings plus numbered lists)."""
    lines = [f"# {questionnaire.title}", ""]
    if questionnaire.description:
        lines += [questionnaire.description, ""]
    lines += [
        f"- **Project:** {project.name}",
        f"- **Client:** {project.client}",
        f"- **Type:** {project.type.label if project.type else ''}",
        f"- **Timeline:** {project.timeline.label if project.timeline else ''}",
        "",
    ]
    for i, section in enumerate(questionnaire.sections, start=1):
        lines.append(f"## {i}. {section.title}")
        if section.description:
            lines += ["", f"*{section.description}*"]
        lines.append("")
        for j, question in enumerate(section.questions, start=1):
            lines.append(f"{j}. {_question_text(question)}")
        lines.append("")
    return "\n".join(lines)


def export_as_json(questionnaire: Questionnaire, project: ProjectConfiguration) -> ExportResult:
    payload = {
        "project": project.model_dump(mode="json"),
        "questionnaire": questionnaire.model_dump(mode="json"),
    }
    content = json.dumps(payload, ensure_ascii=False, indent=2)
    return content.encode("utf-8"), f"{_safe_filename(project.name)}.json"


def export_as_word(questionnaire: Questionnaire, project: ProjectConfiguration) -> ExportResult:
    """
    Build a .docx document with python-docx.

    Returns: (docx_bytes, filename)
    """
    document = docx.Document()
    document.add_heading(questionnaire.title, level=0)
    if questionnaire.description:
        document.add_paragraph(questionnaire.description)

    summary = document.add_table(rows=0, cols=2)
    for label, value in (
        ("Project", project.name),
        ("Client", project.client),
        ("Type", project.type.label if project.type else ""),
        ("Timeline", project.timeline.label if project.timeline else ""),
    ):
        cells = summary.add_row().cells
        cells[0].text = label
        cells[1].text = value

    for i, section in enumerate(questionnaire.sections, start=1):
        document.add_heading(f"{i}. {section.title}", level=1)
        if section.description:
            run = document.add_paragraph().add_run(section.description)
            run.italic = True
        for j, question in enumerate(section.questions, start=1):
            paragraph = document.add_paragraph()
            number = paragraph.add_run(f"{i}.{j} ")
            number.bold = True
            paragraph.add_run(_question_text(question))
            paragraph.paragraph_format.space_after = Pt(6)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue(), f"{_safe_filename(project.name)}.docx"


def export_as_pdf(questionnaire: Questionnaire, project: ProjectConfiguration) -> ExportResult:
    """
    Convert the questionnaire to a styled HTML page optimized for browser print-to-PDF.

    Returns: (html_bytes, filename)
    """
    html_body = _md_to_html(to_markdown(questionnaire, project))
    title = _escape(questionnaire.title)

    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
  @page {{ margin: 2cm; }}
  body {{
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', system-ui, sans-serif;
    max-width: 800px; margin: 0 auto; padding: 2rem;
    color: #1a1a2e; line-height: 1.6; font-size: 14px;
  }}
  h1 {{ color: #6366f1; border-bottom: 2px solid #6366f1; padding-bottom: 0.5rem; }}
  h2 {{ color: #312e81; border-bottom: 1px solid #e5e7eb; padding-bottom: 0.5rem; margin-top: 2rem; }}
  ul, ol {{ padding-left: 1.5rem; }}
  li {{ margin-bottom: 0.25rem; }}
  .print-btn {{
    position: fixed; top: 1rem; right: 1rem; padding: 0.5rem 1.5rem;
    background: #6366f1; color: white; border: none; border-radius: 0.5rem;
    cursor: pointer; font-size: 0.9rem;
  }}
  @media print {{
    .print-btn {{ display: none; }}
    body {{ padding: 0; max-width: none; }}
  }}
</style>
</head>
<body>
<button class="print-btn" onclick="window.print()">Save as PDF</button>
{html_body}
</body>
</html>"""

    return html.encode("utf-8"), f"{_safe_filename(project.name)}.html"


def _escape(text: str) -> str:
    """HTML-escape a string."""
    return (text
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;"))


def _md_to_html(md: str) -> str:
    """
    Convert the markdown produced by to_markdown. Handles:
    - # / ## headings
    - **bold** and *italic*
    - - list items
    - numbered lists
    """
    if not md:
        return "<p>Questionnaire is empty</p>"

    html_parts = []
    in_list = False
    in_ol = False

    for line in md.split("\n"):
        stripped = line.strip()
        is_ol_item = bool(re.match(r"\d+\. ", stripped))

        if in_list and not stripped.startswith("- "):
            html_parts.append("</ul>")
            in_list = False
        if in_ol and not is_ol_item:
            html_parts.append("</ol>")
            in_ol = False

        if not stripped:
            continue

        if stripped.startswith("## "):
            html_parts.append(f"<h2>{_inline(stripped[3:])}</h2>")
        elif stripped.startswith("# "):
            html_parts.append(f"<h1>{_inline(stripped[2:])}</h1>")
        elif stripped.startswith("- "):
            if not in_list:
                html_parts.append("<ul>")
                in_list = True
            html_parts.append(f"<li>{_inline(stripped[2:])}</li>")
        elif is_ol_item:
            if not in_ol:
                html_parts.append("<ol>")
                in_ol = True
            html_parts.append(f"<li>{_inline(stripped.split('. ', 1)[1])}</li>")
        else:
            html_parts.append(f"<p>{_inline(stripped)}</p>")

    if in_list:
        html_parts.append("</ul>")
    if in_ol:
        html_parts.append("</ol>")

    return "\n".join(html_parts)


def _inline(text: str) -> str:
    """Process inline markdown: **bold**, *italic*."""
    text = _escape(text)
    text = re.sub(r'\*\*(.+?)\*\*', r'<strong>\1</strong>', text)
    text = re.sub(r'\*(.+?)\*', r'<em>\1</em>', text)
    return text


EXPORTERS: Dict[str, Callable[[Questionnaire, ProjectConfiguration], ExportResult]] = {
    "word": export_as_word,
    "pdf": export_as_pdf,
    "json": export_as_json,
}

MEDIA_TYPES = {
    "word": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pdf": "text/html; charset=utf-8",
    "json": "application/json",
}
