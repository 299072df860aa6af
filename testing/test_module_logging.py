"""Tests for NoteDraw's log routing and the logging bootstrap."""

import logging

import pytest

from core.config import configure_logging
from core.logging import (
    MODULE_TO_LOG,
    ModuleDispatchHandler,
    ProjectFilter,
    ThirdPartyFilter,
    end_run,
    get_current_run_id,
    module_to_log_name,
    start_run,
)


def make_record(name: str, message: str = "x") -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, "", 0, message, (), None)


@pytest.mark.parametrize(
    "logger_name, log_name",
    [
        ("workflows.notedraw.organizer", "organizer"),
        ("workflows.notedraw.orchestrator", "notedraw"),
        ("workflows.notedraw.nodes.paint_units", "notedraw"),
        ("workflows.shared.llm_utils.models", "workflows-shared"),
        ("core.images.service", "painter"),
        ("core.images.providers.gemini", "painter"),
        ("core.utils.retry", "utils"),
        ("__main__", "cli"),
        ("workflows.notedrawing", "misc"),
        ("httpx", "misc"),
    ],
)
def test_logger_routing(logger_name, log_name):
    assert module_to_log_name(logger_name) == log_name


def test_every_group_has_a_prefix():
    assert set(MODULE_TO_LOG.values()) >= {"organizer", "notedraw", "painter", "cli"}


class TestFilters:
    @pytest.mark.parametrize(
        "name",
        ["core.images.polling", "workflows.notedraw.designer", "testing.conftest", "__main__"],
    )
    def test_project_loggers(self, name):
        assert ProjectFilter().filter(make_record(name))
        assert not ThirdPartyFilter().filter(make_record(name))

    @pytest.mark.parametrize("name", ["httpx", "google_genai.models", "langgraph.pregel", "corelib"])
    def test_library_loggers(self, name):
        assert not ProjectFilter().filter(make_record(name))
        assert ThirdPartyFilter().filter(make_record(name))


class TestDispatch:
    def test_organizer_and_painter_split(self, tmp_path):
        handler = ModuleDispatchHandler(tmp_path)
        handler.setFormatter(logging.Formatter("%(name)s %(message)s"))
        handler.emit(make_record("workflows.notedraw.organizer", "split into 2 cards"))
        handler.emit(make_record("workflows.notedraw.graph", "stage painting"))
        handler.emit(make_record("core.images.service", "painting with fal"))
        handler.close()

        assert (tmp_path / "organizer.log").read_text().strip() == (
            "workflows.notedraw.organizer split into 2 cards"
        )
        assert "stage painting" in (tmp_path / "notedraw.log").read_text()
        assert "painting with fal" in (tmp_path / "painter.log").read_text()
        assert handler._file_cache == {}


@pytest.fixture
def installed_logging(tmp_path, monkeypatch):
    """Run configure_logging into tmp_path and remove its handlers afterwards."""
    monkeypatch.setenv("NOTEDRAW_LOG_DIR", str(tmp_path / "logs"))
    root = logging.getLogger()
    previous_level = root.level

    def installed() -> list[logging.Handler]:
        return [h for h in root.handlers if getattr(h, "_notedraw_handler", False)]

    yield installed

    for handler in installed():
        root.removeHandler(handler)
        handler.close()
    root.setLevel(previous_level)


class TestConfigureLogging:
    def test_routes_project_and_library_records(self, installed_logging, tmp_path):
        configure_logging("notedraw-test", level=logging.INFO)
        assert get_current_run_id() == "notedraw-test"

        logging.getLogger("workflows.notedraw.organizer").info("organized 3 cards")
        logging.getLogger("httpx").info("HTTP Request: POST https://fal.test")
        for handler in installed_logging():
            handler.flush()

        log_dir = tmp_path / "logs"
        assert "organized 3 cards" in (log_dir / "organizer.log").read_text()
        third_party = (log_dir / "run-3p.log").read_text()
        assert "fal.test" in third_party
        assert "organized 3 cards" not in third_party

    def test_reconfiguring_replaces_handlers_and_rotates(self, installed_logging, tmp_path):
        configure_logging("first", level=logging.INFO)
        logging.getLogger("core.images.service").info("first run")
        first_handlers = installed_logging()

        configure_logging("second", level=logging.INFO)
        logging.getLogger("core.images.service").info("second run")

        assert len(installed_logging()) == len(first_handlers) == 3
        assert not set(first_handlers) & set(installed_logging())
        for handler in installed_logging():
            handler.flush()

        log_dir = tmp_path / "logs"
        assert "second run" in (log_dir / "painter.log").read_text()
        assert "first run" in (log_dir / "painter.previous.log").read_text()

    def test_debug_level_in_dev_mode(self, installed_logging, monkeypatch):
        monkeypatch.setenv("NOTEDRAW_MODE", "dev")
        configure_logging("dev-run")
        assert logging.getLogger().level == logging.DEBUG


def test_end_run_stops_rotation(tmp_path):
    handler = ModuleDispatchHandler(tmp_path)
    start_run("once")
    handler.emit(make_record("core.utils.retry", "a"))
    end_run()
    handler.emit(make_record("core.utils.retry", "b"))
    handler.close()

    assert (tmp_path / "utils.log").read_text().split() == ["a", "b"]
    assert not (tmp_path / "utils.previous.log").exists()
