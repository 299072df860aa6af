"""
Pytest configuration for NoteDraw tests.

Every test module gets its own logging run so log files rotate at module
boundaries. Shared fixtures build painters and orchestrators with scripted
collaborators so no test reaches a real text or image provider.

Usage:
    pytest testing/
    pytest testing/test_orchestrator.py -k regenerate
"""

import os
from collections.abc import Generator

import pytest

from core.images import PainterConfig
from core.logging import end_run, start_run
from workflows.notedraw import NoteDrawConfig


@pytest.fixture(autouse=True)
def logging_run(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Rotate logs at test module boundaries.

    When running with pytest-xdist, each worker uses a separate log directory
    to prevent file corruption from concurrent writes.
    """
    worker_id = os.environ.get("PYTEST_XDIST_WORKER")
    if worker_id:
        os.environ["NOTEDRAW_LOG_DIR"] = f"logs/test-{worker_id}"

    test_path = request.node.nodeid.split("::")[0]
    test_name = test_path.replace("/", "-").replace(".py", "")
    start_run(f"test-{test_name}")
    yield
    end_run()


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def painter_config() -> PainterConfig:
    """Painter config with every provider configured and fast polling."""
    return PainterConfig(
        gemini_api_key="gemini-key",
        gemini_base_url=None,
        apimart_api_key="apimart-key",
        apimart_base_url="https://apimart.test/v1",
        openai_api_key="openai-key",
        openai_base_url="https://openai.test/v1",
        fal_api_key="fal-key",
        fal_queue_url="https://queue.fal.test",
        replicate_api_token="replicate-token",
        replicate_base_url="https://replicate.test/v1",
        timeout=5.0,
        poll_interval=2.0,
        max_poll_attempts=60,
        max_retries=2,
    )


@pytest.fixture
def notedraw_config() -> NoteDrawConfig:
    """Pipeline config independent of the environment."""
    return NoteDrawConfig(
        max_input_length=10000,
        min_input_length=10,
        max_sections_per_card=4,
        compact_max_cards=1,
        use_placeholder=False,
        mock_analysis=False,
        default_signature=None,
        credits_per_image=5,
        credits_per_analysis=1,
    )


@pytest.fixture(scope="session")
def event_loop_policy():
    """Use default event loop policy for async tests."""
    import asyncio

    return asyncio.DefaultEventLoopPolicy()


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring external services",
    )
