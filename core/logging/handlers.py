"""Logging handlers for per-module log files.

ModuleDispatchHandler routes project records to one file per module group
(resolved through MODULE_TO_LOG), ThirdPartyHandler collects library records
into a single file. Both rotate ``<name>.log`` to ``<name>.previous.log`` on
the first write of each run.
"""

import logging
from pathlib import Path
from typing import TextIO

PROJECT_PREFIXES = ("core", "workflows", "testing", "__main__")


def _is_project_logger(name: str) -> bool:
    root = name.split(".", 1)[0]
    return root in PROJECT_PREFIXES


class ProjectFilter(logging.Filter):
    """Pass only records emitted by project modules."""

    def filter(self, record: logging.LogRecord) -> bool:
        return _is_project_logger(record.name)


class ThirdPartyFilter(logging.Filter):
    """Pass only records emitted by third-party libraries."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not _is_project_logger(record.name)


def _rotate_log_file(log_dir: Path, log_name: str, stream: TextIO | None) -> TextIO:
    """Move current log to previous, then open a fresh current log.

    Args:
        log_dir: Directory containing log files
        log_name: Base name of the log file (without .log extension)
        stream: Open stream for the current file, closed before renaming

    Returns:
        Handle opened for appending to the new current file.
    """
    current = log_dir / f"{log_name}.log"
    previous = log_dir / f"{log_name}.previous.log"

    if stream:
        stream.close()

    if previous.exists():
        previous.unlink()
    if current.exists():
        current.rename(previous)

    return current.open("a", encoding="utf-8")


class ModuleDispatchHandler(logging.Handler):
    """Route records to ``<log_dir>/<group>.log`` based on logger name.

    File handles are cached per group and opened lazily, so a single handler
    serves every module without one FileHandler per logger.

    Usage:
        handler = ModuleDispatchHandler(Path("logs"))
        handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
        logging.getLogger().addHandler(handler)
    """

    def __init__(self, log_dir: Path):
        super().__init__()
        self.log_dir = log_dir
        self._file_cache: dict[str, TextIO] = {}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Deferred import: run_manager imports nothing from here, but the
            # package __init__ imports both.
            from core.logging.run_manager import module_to_log_name, should_rotate

            log_name = module_to_log_name(record.name)

            if should_rotate(log_name):
                self._rotate_file(log_name)

            file = self._get_or_open_file(log_name)
            file.write(self.format(record) + "\n")
            file.flush()

        except Exception:
            self.handleError(record)

    def _rotate_file(self, log_name: str) -> None:
        existing_stream = self._file_cache.pop(log_name, None)
        self._file_cache[log_name] = _rotate_log_file(
            self.log_dir, log_name, existing_stream
        )

    def _get_or_open_file(self, log_name: str) -> TextIO:
        if log_name not in self._file_cache:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            path = self.log_dir / f"{log_name}.log"
            self._file_cache[log_name] = open(path, "a", encoding="utf-8")
        return self._file_cache[log_name]

    def close(self) -> None:
        """Close all cached file handles."""
        self.acquire()
        try:
            for file in self._file_cache.values():
                try:
                    file.close()
                except OSError:
                    pass
            self._file_cache.clear()
        finally:
            self.release()
        super().close()


class ThirdPartyHandler(logging.FileHandler):
    """Single file (``run-3p.log``) for third-party library records."""

    LOG_NAME = "run-3p"

    def __init__(self, log_dir: Path, **kwargs):
        self.log_dir = log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{self.LOG_NAME}.log"
        super().__init__(log_file, mode="a", encoding="utf-8", **kwargs)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            from core.logging.run_manager import should_rotate

            if should_rotate(self.LOG_NAME):
                self.stream = _rotate_log_file(self.log_dir, self.LOG_NAME, self.stream)

            super().emit(record)

        except Exception:
            self.handleError(record)
