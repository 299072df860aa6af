"""Run lifecycle for module-based log rotation.

A "run" is one logical unit of work: a CLI generation or a test module. The
first record written to each log file within a run rotates that file.

Usage:
    from core.logging import start_run, end_run

    start_run("generate-1a2b3c")
    try:
        ...
    finally:
        end_run()
"""

from contextvars import ContextVar

# ContextVars keep concurrent async runs from sharing rotation state
_current_run_id: ContextVar[str | None] = ContextVar("current_run_id", default=None)
_rotated_this_run: ContextVar[set[str] | None] = ContextVar("rotated_this_run", default=None)

_module_log_cache: dict[str, str] = {}

# Longest-prefix match; unmapped modules go to "misc.log"
MODULE_TO_LOG = {
    # Pipeline
    "workflows.notedraw.organizer": "organizer",
    "workflows.notedraw": "notedraw",
    "workflows.shared": "workflows-shared",
    # Core
    "core.images": "painter",
    "core.utils": "utils",
    "core.config": "config",
    "core.logging": "logging-internal",
    # Tests and entry points
    "testing": "testing",
    "__main__": "cli",
}

_SORTED_PREFIXES = sorted(MODULE_TO_LOG.keys(), key=len, reverse=True)


def start_run(run_id: str) -> None:
    """Begin a new run; subsequent first writes rotate each log file."""
    _current_run_id.set(run_id)
    _rotated_this_run.set(set())


def end_run() -> None:
    """End the current run. Missing calls are harmless."""
    _current_run_id.set(None)
    _rotated_this_run.set(None)


def get_current_run_id() -> str | None:
    return _current_run_id.get()


def should_rotate(log_name: str) -> bool:
    """Return True exactly once per log file per run.

    Args:
        log_name: The log file name (without .log extension)
    """
    run_id = _current_run_id.get()
    rotated = _rotated_this_run.get()

    if run_id is None or rotated is None:
        return False

    if log_name in rotated:
        return False

    rotated.add(log_name)
    return True


def module_to_log_name(module_name: str) -> str:
    """Resolve a logger name to its log file name (cached).

    Args:
        module_name: The __name__ of the module (e.g. "core.images.polling")

    Returns:
        Log file name without extension (e.g. "painter")
    """
    if module_name not in _module_log_cache:
        _module_log_cache[module_name] = _compute_log_name(module_name)
    return _module_log_cache[module_name]


def _compute_log_name(module_name: str) -> str:
    for prefix in _SORTED_PREFIXES:
        if module_name == prefix or module_name.startswith(prefix + "."):
            return MODULE_TO_LOG[prefix]
    return "misc"
