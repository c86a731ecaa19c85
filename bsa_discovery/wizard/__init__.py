"""Wizard navigation and generation lifecycle."""

from bsa_discovery.wizard.controller import WizardController
from bsa_discovery.wizard.models import FIRST_STEP, LAST_STEP, STEP_LABELS, WizardStep
from bsa_discovery.wizard.status import ALLOWED_TRANSITIONS, missing_for_step, validate_transition

__all__ = [
    "ALLOWED_TRANSITIONS",
    "FIRST_STEP",
    "LAST_STEP",
    "STEP_LABELS",
    "WizardController",
    "WizardStep",
    "missing_for_step",
    "validate_transition",
]
