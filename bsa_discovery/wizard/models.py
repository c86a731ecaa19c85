"""
Wizard step definitions.
"""

from enum import IntEnum


class WizardStep(IntEnum):
    """The three linear wizard steps, numbered as shown to the user."""

    CONFIGURATION = 1
    AREAS_AND_UPLOAD = 2
    READY_TO_GENERATE = 3

    @property
    def label(self) -> str:
        return STEP_LABELS[self]

    @property
    def slug(self) -> str:
        return self.name.lower()


STEP_LABELS = {
    WizardStep.CONFIGURATION: "Project Configuration",
    WizardStep.AREAS_AND_UPLOAD: "Topic Areas & Documents",
    WizardStep.READY_TO_GENERATE: "Generate Questionnaire",
}

FIRST_STEP = WizardStep.CONFIGURATION
LAST_STEP = WizardStep.READY_TO_GENERATE
