"""
QuestionnaireRenderer - read-only presentation of a generated questionnaire.

Produces the preview view model, the plain-text copy and the question
count, and runs the simulated export: an "Export Started" notice right
away, the real exporter after a fixed delay, then "Export Complete".
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

import structlog

from bsa_discovery.config.models import ExportSettings
from bsa_discovery.exceptions import ClipboardWriteError, UnsupportedExportFormatError
from bsa_discovery.notices import NoticeBoard
from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.questionnaire.exporter import EXPORTERS, MEDIA_TYPES
from bsa_discovery.questionnaire.models import Questionnaire, QuestionItem
from bsa_discovery.scheduling import DelayedTask, Scheduler

logger = structlog.get_logger("export")


def question_text(question: QuestionItem) -> str:
    """Text of a question given either as a plain string or a Question."""
    return question if isinstance(question, str) else question.text


def compute_total_questions(questionnaire: Questionnaire) -> int:
    return sum(len(section.questions) for section in questionnaire.sections)


def to_plain_text(questionnaire: Questionnaire, project: ProjectConfiguration) -> str:
    """
    Plain-text copy of the questionnaire.

    Type and timeline are printed as raw values, empty when unset.
    Numbering is "{section}.{question}", both 1-based.
    """
    content = f"{questionnaire.title}\n\n"
    content += f"Project: {project.name}\n"
    content += f"Client: {project.client}\n"
    content += f"Type: {project.type_value}\n"
    content += f"Timeline: {project.timeline_value}\n\n"

    for i, section in enumerate(questionnaire.sections, start=1):
        content += f"{i}. {section.title}\n"
        if section.description:
            content += f"{section.description}\n"
        content += "\n"
        for j, question in enumerate(section.questions, start=1):
            content += f"{i}.{j} {question_text(question)}\n"
        content += "\n"

    return content


def build_view(questionnaire: Questionnaire, project: ProjectConfiguration) -> Dict[str, Any]:
    """View model for the questionnaire preview."""
    total = compute_total_questions(questionnaire)
    section_count = len(questionnaire.sections)
    generated_at = questionnaire.metadata.generated_at or datetime.now()
    return {
        "title": questionnaire.title,
        "description": questionnaire.description,
        "project": {
            "name": project.name,
            "client": project.client,
            "type": project.type_value,
            "timeline": project.timeline_value,
        },
        "section_count": section_count,
        "question_count": total,
        "ai_enhanced": project.ai_enabled,
        "sections": [
            {
                "number": i,
                "title": section.title,
                "description": section.description,
                "questions": [
                    {"number": f"{i}.{j}", "text": question_text(q)}
                    for j, q in enumerate(section.questions, start=1)
                ],
            }
            for i, section in enumerate(questionnaire.sections, start=1)
        ],
        "generated_on": generated_at.date().isoformat(),
        "footer": f"{total} questions across {section_count} sections",
    }


class ExportStatus(str, Enum):
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ExportJob:
    """One simulated export; holds the document once the delay has passed."""

    def __init__(self, export_format: str, task: DelayedTask):
        self.format = export_format
        self.task = task
        self.status = ExportStatus.RUNNING
        self.started_at = datetime.now()
        self.content: Optional[bytes] = None
        self.filename: Optional[str] = None
        self.error: Optional[str] = None

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self.format]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "filename": self.filename,
            "size": len(self.content) if self.content is not None else None,
            "error": self.error,
        }


class QuestionnaireRenderer:
    """Clipboard copy and simulated export for one wizard session."""

    def __init__(
        self,
        scheduler: Scheduler,
        notices: Optional[NoticeBoard] = None,
        settings: Optional[ExportSettings] = None,
        session_id: str = "",
    ):
        self.scheduler = scheduler
        self.notices = notices if notices is not None else NoticeBoard()
        self.settings = settings or ExportSettings()
        self._session_id = session_id
        self.jobs: Dict[str, ExportJob] = {}

    def copy_to_clipboard(
        self,
        questionnaire: Questionnaire,
        project: ProjectConfiguration,
        writer: Callable[[str], Any],
    ) -> str:
        """Write the plain-text copy through *writer* and confirm with a notice.

        Raises:
            ClipboardWriteError: writer raised; a destructive notice is posted first.
        """
        content = to_plain_text(questionnaire, project)
        try:
            writer(content)
        except Exception as exc:
            self.notices.error("Copy failed", "Questionnaire content could not be copied.")
            logger.warning("clipboard_write_failed", session_id=self._session_id, error=str(exc))
            raise ClipboardWriteError(str(exc)) from exc

        self.notices.post("Copied to Clipboard", "Questionnaire content has been copied.")
        logger.info("clipboard_written", session_id=self._session_id, chars=len(content))
        return content

    def export(
        self,
        questionnaire: Questionnaire,
        project: ProjectConfiguration,
        export_format: str,
    ) -> ExportJob:
        """Start a simulated export. A running export of the same format is replaced."""
        fmt = export_format.lower()
        if fmt not in EXPORTERS:
            raise UnsupportedExportFormatError(export_format)

        previous = self.jobs.get(fmt)
        if previous is not None:
            previous.task.cancel()

        exporter = EXPORTERS[fmt]
        task = DelayedTask(
            self.scheduler,
            self.settings.delay_ms / 1000,
            lambda: exporter(questionnaire, project),
            name=f"export-{fmt}",
        )
        job = ExportJob(fmt, task)
        self.jobs[fmt] = job

        self.notices.post("Export Started", f"Generating {fmt.upper()} document...")
        logger.info("export_started", session_id=self._session_id, format=fmt)

        task.add_done_callback(lambda t: self._on_export_done(job, t))
        return job

    def get_export(self, export_format: str) -> Optional[ExportJob]:
        fmt = export_format.lower()
        if fmt not in EXPORTERS:
            raise UnsupportedExportFormatError(export_format)
        return self.jobs.get(fmt)

    def close(self) -> int:
        """Cancel running exports. Returns how many were cancelled."""
        return sum(1 for job in self.jobs.values() if job.task.cancel())

    def _on_export_done(self, job: ExportJob, task: DelayedTask) -> None:
        if task.cancelled():
            job.status = ExportStatus.CANCELLED
            logger.debug("export_cancelled", session_id=self._session_id, format=job.format)
            return

        error = task.exception()
        if error is not None:
            job.status = ExportStatus.FAILED
            job.error = str(error)
            self.notices.error(
                "Export Failed",
                f"Your questionnaire could not be exported as {job.format.upper()}.",
            )
            logger.error(
                "export_failed",
                session_id=self._session_id,
                format=job.format,
                error=str(error),
            )
            return

        job.content, job.filename = task.result()
        job.status = ExportStatus.COMPLETE
        self.notices.post(
            "Export Complete",
            f"Your questionnaire has been exported as {job.format.upper()}.",
        )
        logger.info(
            "export_complete",
            session_id=self._session_id,
            format=job.format,
            filename=job.filename,
            size=len(job.content),
        )
