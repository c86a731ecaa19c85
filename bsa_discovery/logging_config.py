"""
Centralized logging configuration for the discovery questionnaire tool.

Separates logs into multiple files by component:

    logs/
    ├── server.log          # HTTP API requests
    ├── wizard.log          # Step transitions, generation lifecycle
    ├── uploads.log         # Upload validation and simulated progress
    ├── questionnaire.log   # Questionnaire synthesis and rendering
    ├── export.log          # Export jobs (word, pdf, json)
    ├── session.log         # Session create / evict / teardown
    ├── config.log          # Settings and question bank loading
    └── errors.log          # ALL errors from ALL components (ERROR+)

Usage:
    from bsa_discovery.logging_config import setup_logging
    setup_logging("server")
"""

import logging
import sys
from pathlib import Path

import structlog

LOGS_DIR = Path(__file__).parent.parent / "logs"

# ---------------------------------------------------------------------------
# Category → file mapping
# ---------------------------------------------------------------------------

LOG_CATEGORIES = {
    "server": "server.log",
    "wizard": "wizard.log",
    "uploads": "uploads.log",
    "questionnaire": "questionnaire.log",
    "export": "export.log",
    "session": "session.log",
    "config": "config.log",
}

# Which categories each process activates
PROCESS_CATEGORIES = {
    "server": list(LOG_CATEGORIES.keys()),
}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

_initialized = False


def setup_logging(component: str = "app", level: str = "DEBUG", logs_dir: Path = None) -> None:
    """Configure logging with per-category file handlers.

    Args:
        component: Process name. Determines which log files are created.
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        logs_dir: Override for the log directory (defaults to ./logs).
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    target_dir = Path(logs_dir) if logs_dir else LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    log_level = getattr(logging, level.upper(), logging.DEBUG)

    # -----------------------------------------------------------------------
    # Root logger: console + errors.log
    # -----------------------------------------------------------------------
    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_h = logging.StreamHandler(sys.stdout)
    console_h.setLevel(log_level)
    console_h.setFormatter(fmt)
    root.addHandler(console_h)

    # errors.log catches ERROR+ from every logger via propagation
    errors_h = logging.FileHandler(str(target_dir / "errors.log"), encoding="utf-8")
    errors_h.setLevel(logging.ERROR)
    errors_h.setFormatter(fmt)
    root.addHandler(errors_h)

    # -----------------------------------------------------------------------
    # Per-category loggers with dedicated file handlers
    # -----------------------------------------------------------------------
    categories = PROCESS_CATEGORIES.get(component, list(LOG_CATEGORIES.keys()))

    for category in categories:
        log_file = LOG_CATEGORIES.get(category)
        if not log_file:
            continue

        cat_logger = logging.getLogger(category)
        cat_logger.setLevel(log_level)
        if not cat_logger.handlers:
            file_h = logging.FileHandler(
                str(target_dir / log_file), encoding="utf-8",
            )
            file_h.setLevel(log_level)
            file_h.setFormatter(fmt)
            cat_logger.addHandler(file_h)
        cat_logger.propagate = True

    # -----------------------------------------------------------------------
    # structlog → stdlib bridge
    # -----------------------------------------------------------------------
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    init_logger = structlog.get_logger(component)
    init_logger.info(
        "logging_initialized",
        component=component,
        categories=categories,
        level=level,
    )
