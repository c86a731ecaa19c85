"""
Custom exceptions for the discovery questionnaire wizard.

Every error is local to one file or one action: the wizard session that
raised it stays usable.
"""

from typing import Iterable


class WizardError(Exception):
    """Base class for all wizard errors."""
    pass


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


class UploadRejectedError(WizardError):
    """A candidate file failed validation and was not accepted."""

    title = "Upload rejected"

    def __init__(self, filename: str, message: str):
        super().__init__(message)
        self.filename = filename


class InvalidFileTypeError(UploadRejectedError):
    """
    Raised when a file extension is outside the accepted set.

    Example:
        >>> validate_file(FileHandle(name="notes.exe", size=10))
        InvalidFileTypeError: notes.exe is not a supported file type.
    """

    title = "Invalid file type"

    def __init__(self, filename: str):
        super().__init__(filename, f"{filename} is not a supported file type.")


class FileTooLargeError(UploadRejectedError):
    """Raised when a file exceeds the configured size limit."""

    title = "File too large"

    def __init__(self, filename: str, limit_label: str = "10MB"):
        super().__init__(filename, f"{filename} exceeds the {limit_label} limit.")
        self.limit_label = limit_label


# ---------------------------------------------------------------------------
# Wizard
# ---------------------------------------------------------------------------


class InvalidTransitionError(WizardError, ValueError):
    """
    Raised when attempting an illegal wizard step transition.

    Example:
        >>> validate_transition(WizardStep.CONFIGURATION, WizardStep.READY_TO_GENERATE)
        InvalidTransitionError: Invalid transition: configuration → ready_to_generate
    """
    pass


class StepIncompleteError(WizardError):
    """Raised when moving forward while required fields are still missing."""

    def __init__(self, step, missing: Iterable[str]):
        self.step = step
        self.missing = list(missing)
        super().__init__(
            f"Step '{step.label}' is incomplete: missing {', '.join(self.missing)}"
        )


class GenerationInProgressError(WizardError):
    """Raised when generation is triggered while a previous run is pending."""
    pass


class UnknownTopicAreaError(WizardError, KeyError):
    """Raised when selecting a topic area id that is not in the catalog."""

    def __init__(self, area_id: str):
        super().__init__(area_id)
        self.area_id = area_id

    def __str__(self):
        return f"Unknown topic area: {self.area_id}"


class InvalidProjectFieldError(WizardError, ValueError):
    """Raised when a project field update has an unknown name or bad value."""
    pass


class UploadsUnavailableError(WizardError):
    """Raised when files are submitted while the upload panel is hidden."""
    pass


# ---------------------------------------------------------------------------
# Questionnaire
# ---------------------------------------------------------------------------


class QuestionnaireNotReadyError(WizardError):
    """Raised when the questionnaire is requested before generation completed."""
    pass


class UnsupportedExportFormatError(WizardError, ValueError):
    """Raised for export formats other than word, pdf and json."""

    def __init__(self, export_format: str):
        super().__init__(f"Unsupported export format: {export_format}")
        self.export_format = export_format


class ClipboardWriteError(WizardError):
    """Raised when the clipboard writer rejected the questionnaire text."""
    pass


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class SessionNotFoundError(WizardError, KeyError):
    """Raised when a wizard session id is unknown or already evicted."""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self):
        return f"Session not found: {self.session_id}"
