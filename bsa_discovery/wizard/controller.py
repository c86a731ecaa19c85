"""
WizardController - step navigation and project configuration.

Owns the current step, the ProjectConfiguration and the generation
lifecycle. Generation is simulated: a DelayedTask fires after a fixed delay
and builds the questionnaire from a snapshot of the configuration taken
when generation started.
"""

from typing import Any, Dict, Iterable, List, Optional

import structlog
from pydantic import ValidationError

from bsa_discovery.areas import is_known_area
from bsa_discovery.config.models import GenerationSettings
from bsa_discovery.exceptions import (
    GenerationInProgressError,
    InvalidProjectFieldError,
    InvalidTransitionError,
    QuestionnaireNotReadyError,
    StepIncompleteError,
    UnknownTopicAreaError,
)
from bsa_discovery.notices import NoticeBoard
from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.questionnaire.generator import QuestionnaireGenerator
from bsa_discovery.questionnaire.models import Questionnaire
from bsa_discovery.scheduling import DelayedTask, Scheduler
from bsa_discovery.uploads.models import FileHandle
from bsa_discovery.wizard.models import FIRST_STEP, LAST_STEP, WizardStep
from bsa_discovery.wizard.status import is_forward, missing_for_step, validate_transition

logger = structlog.get_logger("wizard")

# Fields settable through update_project; areas go through toggle/set_areas
EDITABLE_FIELDS = {"name", "client", "type", "timeline", "context", "ai_enabled"}


class WizardController:
    """
    Three-step wizard state for one user.

    Args:
        scheduler: Timer source for the generation delay.
        settings: Generation delay.
        generator: Builds the questionnaire; defaults to the YAML question bank.
        notices: Board receiving generation failure notices.
        session_id: Used only as log context.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Optional[GenerationSettings] = None,
        generator: Optional[QuestionnaireGenerator] = None,
        notices: Optional[NoticeBoard] = None,
        session_id: str = "",
    ):
        self.scheduler = scheduler
        self.settings = settings or GenerationSettings()
        self.generator = generator or QuestionnaireGenerator()
        self.notices = notices if notices is not None else NoticeBoard()
        self._session_id = session_id

        self.step = FIRST_STEP
        self.project = ProjectConfiguration()
        self.uploaded_files: List[FileHandle] = []
        self.questionnaire: Optional[Questionnaire] = None
        self._generation: Optional[DelayedTask] = None

    # ------------------------------------------------------------------
    # Project configuration
    # ------------------------------------------------------------------

    def update_project(self, **fields: Any) -> ProjectConfiguration:
        """
        Update one or more project fields.

        Empty strings for type or timeline clear the choice.

        Raises:
            InvalidProjectFieldError: Unknown field name or invalid value
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise InvalidProjectFieldError(f"Unknown project field(s): {', '.join(sorted(unknown))}")

        for key in ("type", "timeline"):
            if fields.get(key) == "":
                fields[key] = None

        data = {**self.project.model_dump(), **fields}
        try:
            self.project = ProjectConfiguration.model_validate(data)
        except ValidationError as e:
            raise InvalidProjectFieldError(str(e)) from e

        logger.debug("project_updated", session_id=self._session_id, fields=sorted(fields))
        return self.project

    def toggle_area(self, area_id: str) -> bool:
        """Flip selection of one topic area. Returns True if now selected."""
        if not is_known_area(area_id):
            raise UnknownTopicAreaError(area_id)

        areas = list(self.project.selected_areas)
        if area_id in areas:
            areas.remove(area_id)
            selected = False
        else:
            areas.append(area_id)
            selected = True
        self.project = self.project.model_copy(update={"selected_areas": areas})

        logger.debug(
            "area_toggled",
            session_id=self._session_id,
            area_id=area_id,
            selected=selected,
            total=len(areas),
        )
        return selected

    def set_areas(self, area_ids: Iterable[str]) -> List[str]:
        """Replace the whole selection. Unknown ids reject the call unchanged."""
        ids = list(area_ids)
        for area_id in ids:
            if not is_known_area(area_id):
                raise UnknownTopicAreaError(area_id)
        # Validate to dedupe
        self.project = ProjectConfiguration.model_validate(
            {**self.project.model_dump(), "selected_areas": ids}
        )
        return list(self.project.selected_areas)

    def set_uploaded_files(self, files: List[FileHandle]) -> None:
        """Receives the accepted-file list from the upload simulator."""
        self.uploaded_files = list(files)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def missing_fields(self) -> List[str]:
        return missing_for_step(self.step, self.project)

    def can_advance(self) -> bool:
        return self.step < LAST_STEP and not self.missing_fields()

    def advance(self) -> WizardStep:
        if self.step == LAST_STEP:
            raise InvalidTransitionError(f"Invalid transition: {self.step.slug} has no next step")
        return self.go_to(WizardStep(self.step + 1))

    def go_back(self) -> WizardStep:
        """Step back one page, keeping entered data. Cancels pending generation."""
        if self.step == FIRST_STEP:
            raise InvalidTransitionError(f"Invalid transition: {self.step.slug} has no previous step")
        return self.go_to(WizardStep(self.step - 1))

    def go_to(self, step: WizardStep) -> WizardStep:
        """
        Move to *step* through the transition table.

        Raises:
            InvalidTransitionError: Step is unknown or not adjacent
            StepIncompleteError: Forward move with required fields missing
        """
        try:
            target = WizardStep(step)
        except ValueError:
            raise InvalidTransitionError(f"Invalid transition: unknown step {step!r}")
        validate_transition(self.step, target)

        if is_forward(self.step, target):
            missing = self.missing_fields()
            if missing:
                raise StepIncompleteError(self.step, missing)
        elif self.cancel_generation():
            logger.info("generation_cancelled_on_back", session_id=self._session_id)

        previous, self.step = self.step, target
        logger.info(
            "wizard_step_changed",
            session_id=self._session_id,
            from_step=previous.slug,
            to_step=target.slug,
        )
        return self.step

    @property
    def uploads_visible(self) -> bool:
        return self.step == WizardStep.AREAS_AND_UPLOAD and self.project.ai_enabled

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    @property
    def is_generating(self) -> bool:
        return self._generation is not None and not self._generation.done()

    def start_generation(self) -> DelayedTask:
        """
        Schedule questionnaire generation after the configured delay.

        Returns:
            The pending task; its result is the new Questionnaire.

        Raises:
            InvalidTransitionError: Not on the last step
            GenerationInProgressError: A previous generation is still pending
        """
        if self.step != LAST_STEP:
            raise InvalidTransitionError(
                f"Generation is only available at step {LAST_STEP.value}, current step is {self.step.value}"
            )
        if self.is_generating:
            raise GenerationInProgressError("Questionnaire generation is already running")

        project = self.project.model_copy(deep=True)
        documents = [f.name for f in self.uploaded_files]
        task = DelayedTask(
            self.scheduler,
            self.settings.delay_ms / 1000,
            lambda: self.generator.generate(project, documents),
            name="generate-questionnaire",
        )
        self._generation = task
        task.add_done_callback(self._on_generation_done)

        logger.info(
            "generation_started",
            session_id=self._session_id,
            project_name=project.name,
            areas=len(project.selected_areas),
            documents=len(documents) if project.ai_enabled else 0,
            delay_ms=self.settings.delay_ms,
        )
        return task

    def cancel_generation(self) -> bool:
        """Cancel the pending generation. Returns False if nothing was pending."""
        if not self.is_generating:
            return False
        cancelled = self._generation.cancel()
        self._generation = None
        return cancelled

    def require_questionnaire(self) -> Questionnaire:
        if self.questionnaire is None:
            raise QuestionnaireNotReadyError("No questionnaire has been generated yet")
        return self.questionnaire

    def _on_generation_done(self, task: DelayedTask) -> None:
        if task.cancelled():
            logger.info("generation_cancelled", session_id=self._session_id)
            return
        if self._generation is task:
            self._generation = None

        error = task.exception()
        if error is not None:
            self.notices.error("Generation failed", "The questionnaire could not be generated.")
            logger.error("generation_failed", session_id=self._session_id, error=str(error))
            return

        self.questionnaire = task.result()
        logger.info(
            "generation_complete",
            session_id=self._session_id,
            title=self.questionnaire.title,
            sections=len(self.questionnaire.sections),
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def summary(self) -> Dict[str, Any]:
        """Step 3 summary: project name, area count and document count."""
        return {
            "project_name": self.project.name,
            "selected_areas": len(self.project.selected_areas),
            "documents": len(self.uploaded_files) if self.project.ai_enabled else None,
        }

    def close(self) -> None:
        self.cancel_generation()
