"""
Settings loader - reads WizardSettings from YAML.

Lookup order for the file path:
    1. explicit ``config_path`` argument
    2. BSA_WIZARD_CONFIG environment variable (.env is honoured)
    3. config/wizard.yaml relative to the working directory

A missing file yields defaults. A broken file is logged and also yields
defaults, so the wizard always starts.
"""

import os
from pathlib import Path
from typing import Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from bsa_discovery.config.models import WizardSettings

logger = structlog.get_logger("config")

DEFAULT_CONFIG_PATH = "config/wizard.yaml"
CONFIG_ENV_VAR = "BSA_WIZARD_CONFIG"


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    if config_path:
        return Path(config_path)
    load_dotenv()
    return Path(os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))


def load_settings(config_path: Optional[str] = None) -> WizardSettings:
    """Load wizard settings, falling back to defaults on any problem.

    ``LOG_LEVEL`` overrides the logging level whichever way the settings
    were obtained.
    """
    path = resolve_config_path(config_path)

    if not path.exists():
        logger.info("wizard_config_not_found", path=str(path), action="using_defaults")
        return _apply_env_overrides(WizardSettings())

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        settings = WizardSettings(**raw)
    except (yaml.YAMLError, ValidationError, TypeError) as exc:
        logger.error("wizard_config_load_error", path=str(path), error=str(exc))
        return _apply_env_overrides(WizardSettings())

    settings = _apply_env_overrides(settings)
    logger.info(
        "wizard_config_loaded",
        path=str(path),
        accepted_extensions=settings.uploads.accepted_extensions,
        max_file_size_bytes=settings.uploads.max_file_size_bytes,
    )
    return settings


def _apply_env_overrides(settings: WizardSettings) -> WizardSettings:
    env_level = os.getenv("LOG_LEVEL")
    if env_level:
        settings.logging.level = env_level
    return settings
