"""
Wizard step state machine.

Defines allowed step transitions and the data each forward move requires.
"""

from typing import Dict, List, Set

from bsa_discovery.exceptions import InvalidTransitionError
from bsa_discovery.project import ProjectConfiguration
from bsa_discovery.wizard.models import WizardStep


# State machine: allowed transitions from each step
ALLOWED_TRANSITIONS: Dict[WizardStep, Set[WizardStep]] = {
    WizardStep.CONFIGURATION: {
        WizardStep.AREAS_AND_UPLOAD,
    },
    WizardStep.AREAS_AND_UPLOAD: {
        WizardStep.CONFIGURATION,
        WizardStep.READY_TO_GENERATE,
    },
    WizardStep.READY_TO_GENERATE: {
        WizardStep.AREAS_AND_UPLOAD,
    },
}


def validate_transition(from_step: WizardStep, to_step: WizardStep) -> None:
    """
    Validate that a step transition is allowed by the state machine.

    Args:
        from_step: Current step
        to_step: Target step

    Raises:
        InvalidTransitionError: If transition is not allowed

    Example:
        >>> validate_transition(WizardStep.CONFIGURATION, WizardStep.AREAS_AND_UPLOAD)  # OK
        >>> validate_transition(WizardStep.CONFIGURATION, WizardStep.READY_TO_GENERATE)  # Raises
    """
    allowed = ALLOWED_TRANSITIONS.get(from_step, set())
    if to_step not in allowed:
        raise InvalidTransitionError(
            f"Invalid transition: {from_step.slug} → {to_step.slug}"
        )


def is_forward(from_step: WizardStep, to_step: WizardStep) -> bool:
    return to_step > from_step


def missing_for_step(step: WizardStep, project: ProjectConfiguration) -> List[str]:
    """
    Fields that must be filled before leaving *step* forward.

    Step 1 needs a non-empty name and client; step 2 needs at least one
    selected topic area. Step 3 has no forward move.
    """
    if step is WizardStep.CONFIGURATION:
        return project.missing_basics()
    if step is WizardStep.AREAS_AND_UPLOAD:
        return [] if project.selected_areas else ["selected_areas"]
    return []
