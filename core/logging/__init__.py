"""Module-based logging with run-based rotation.

Usage:
    # At run entry points (CLI, tests):
    from core.logging import start_run, end_run

    start_run("generate-123")
    try:
        ...
    finally:
        end_run()

    # In modules:
    import logging
    logger = logging.getLogger(__name__)

Log files are created in logs/ (override with NOTEDRAW_LOG_DIR):
    - logs/organizer.log, logs/notedraw.log, logs/painter.log, ...
    - logs/run-3p.log (all third-party libraries)
    - logs/*.previous.log (previous run's logs)
"""

from core.logging.handlers import (
    ModuleDispatchHandler,
    ProjectFilter,
    ThirdPartyFilter,
    ThirdPartyHandler,
)
from core.logging.run_manager import (
    MODULE_TO_LOG,
    end_run,
    get_current_run_id,
    module_to_log_name,
    start_run,
)

__all__ = [
    "start_run",
    "end_run",
    "get_current_run_id",
    "module_to_log_name",
    "ModuleDispatchHandler",
    "ThirdPartyHandler",
    "ProjectFilter",
    "ThirdPartyFilter",
    "MODULE_TO_LOG",
]
