"""
WizardSession - one user's wizard, uploads, notices and exports.
"""

import time
from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

from bsa_discovery.areas import selected_area_badges
from bsa_discovery.config.models import WizardSettings
from bsa_discovery.exceptions import UploadsUnavailableError
from bsa_discovery.notices import NoticeBoard
from bsa_discovery.questionnaire.generator import QuestionnaireGenerator
from bsa_discovery.questionnaire.renderer import QuestionnaireRenderer, build_view, to_plain_text
from bsa_discovery.scheduling import Scheduler
from bsa_discovery.uploads.models import FileHandle, UploadEntry
from bsa_discovery.uploads.simulator import UploadSimulator, default_id_factory
from bsa_discovery.wizard.controller import WizardController

logger = structlog.get_logger("session")


class WizardSession:
    """
    Composes the three components around a shared notice board.

    The upload simulator reports accepted files to the controller, which
    passes their names to the generator when AI enhancement is on.
    """

    def __init__(
        self,
        session_id: str,
        scheduler: Scheduler,
        settings: Optional[WizardSettings] = None,
        generator: Optional[QuestionnaireGenerator] = None,
        id_factory: Callable[[], str] = default_id_factory,
        clock: Callable[[], float] = time.monotonic,
    ):
        settings = settings or WizardSettings()
        self.session_id = session_id
        self._clock = clock
        self.created_at = clock()
        self.last_active = self.created_at

        self.notices = NoticeBoard()
        self.controller = WizardController(
            scheduler,
            settings=settings.generation,
            generator=generator,
            notices=self.notices,
            session_id=session_id,
        )
        self.uploads = UploadSimulator(
            scheduler,
            settings=settings.uploads,
            notices=self.notices,
            id_factory=id_factory,
            on_files_change=self.controller.set_uploaded_files,
            session_id=session_id,
        )
        self.renderer = QuestionnaireRenderer(
            scheduler,
            notices=self.notices,
            settings=settings.export,
            session_id=session_id,
        )

    def touch(self) -> None:
        self.last_active = self._clock()

    def idle_seconds(self) -> float:
        return self._clock() - self.last_active

    def submit_uploads(self, candidates: Iterable[FileHandle]) -> List[UploadEntry]:
        """
        Hand files to the upload simulator.

        Raises:
            UploadsUnavailableError: Not on step 2 or AI enhancement is off
        """
        if not self.controller.uploads_visible:
            raise UploadsUnavailableError(
                "Document upload is only available on step 2 with AI enhancement enabled"
            )
        return self.uploads.submit(candidates)

    def questionnaire_view(self) -> Dict[str, Any]:
        questionnaire = self.controller.require_questionnaire()
        return build_view(questionnaire, self.controller.project)

    def plain_text(self) -> str:
        return to_plain_text(self.controller.require_questionnaire(), self.controller.project)

    def copy_text(self) -> str:
        """Copy action; the returned string is what lands on the clipboard."""
        questionnaire = self.controller.require_questionnaire()
        buffer: List[str] = []
        self.renderer.copy_to_clipboard(questionnaire, self.controller.project, buffer.append)
        return buffer[0]

    def export(self, export_format: str):
        questionnaire = self.controller.require_questionnaire()
        return self.renderer.export(questionnaire, self.controller.project, export_format)

    def snapshot(self, drain_notices: bool = True) -> Dict[str, Any]:
        """Full render state for the browser.

        Notices are drained by default so each one is shown once.
        """
        controller = self.controller
        notices = self.notices.drain() if drain_notices else self.notices.peek()
        return {
            "session_id": self.session_id,
            "step": controller.step.value,
            "step_label": controller.step.label,
            "project": controller.project.model_dump(mode="json"),
            "selected_area_badges": selected_area_badges(controller.project.selected_areas),
            "missing_fields": controller.missing_fields(),
            "can_advance": controller.can_advance(),
            "uploads_visible": controller.uploads_visible,
            "uploads": self.uploads.view(),
            "is_generating": controller.is_generating,
            "has_questionnaire": controller.questionnaire is not None,
            "summary": controller.summary(),
            "exports": {fmt: job.to_dict() for fmt, job in self.renderer.jobs.items()},
            "notices": [n.model_dump(mode="json") for n in notices],
        }

    def close(self) -> int:
        """Cancel every pending timer and task owned by this session."""
        cancelled = self.uploads.close()
        cancelled += self.renderer.close()
        if self.controller.cancel_generation():
            cancelled += 1
        logger.debug("session_closed", session_id=self.session_id, cancelled=cancelled)
        return cancelled
