"""NoteDraw configuration and environment setup.

This module provides centralized configuration for the NoteDraw system,
including development mode detection, LangSmith tracing setup and logging
bootstrap for CLI and test entry points.
"""

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def is_dev_mode() -> bool:
    """Check if running in development mode.

    Returns:
        True if NOTEDRAW_MODE is set to 'dev', False otherwise.
    """
    return os.getenv("NOTEDRAW_MODE", "prod").lower() == "dev"


def configure_langsmith() -> None:
    """Configure LangSmith tracing based on NOTEDRAW_MODE.

    When NOTEDRAW_MODE=dev:
        - Enables LangSmith tracing
        - Sets project to 'notedraw-dev'

    When NOTEDRAW_MODE=prod (or unset):
        - Disables LangSmith tracing

    This function is idempotent and safe to call multiple times.
    """
    if is_dev_mode():
        os.environ.setdefault("LANGSMITH_TRACING", "true")
        os.environ.setdefault("LANGSMITH_PROJECT", "notedraw-dev")
    else:
        os.environ["LANGSMITH_TRACING"] = "false"


def get_log_dir() -> Path:
    """Directory for module log files (NOTEDRAW_LOG_DIR, default 'logs')."""
    return Path(os.getenv("NOTEDRAW_LOG_DIR", "logs"))


def configure_logging(run_name: str, level: int | None = None) -> None:
    """Install module-dispatch file logging and start a logging run.

    Project loggers (``core.*``, ``workflows.*``) are routed to per-module
    files, everything else goes to ``run-3p.log``. A console handler mirrors
    project records to stderr. Calling this again replaces the handlers
    installed by a previous call.

    Args:
        run_name: Identifier for the logging run (triggers log rotation)
        level: Root log level (default INFO, DEBUG in dev mode)
    """
    from core.logging import (
        ModuleDispatchHandler,
        ProjectFilter,
        ThirdPartyFilter,
        ThirdPartyHandler,
        start_run,
    )

    if level is None:
        level = logging.DEBUG if is_dev_mode() else logging.INFO

    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_notedraw_handler", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    module_handler = ModuleDispatchHandler(log_dir)
    module_handler.addFilter(ProjectFilter())

    third_party_handler = ThirdPartyHandler(log_dir)
    third_party_handler.addFilter(ThirdPartyFilter())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.addFilter(ProjectFilter())

    for handler in (module_handler, third_party_handler, console_handler):
        handler.setFormatter(formatter)
        handler._notedraw_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(level)
    start_run(run_name)
