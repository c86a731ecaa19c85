"""In-memory wizard sessions."""

from bsa_discovery.sessions.session import WizardSession
from bsa_discovery.sessions.store import WizardSessionStore

__all__ = ["WizardSession", "WizardSessionStore"]
