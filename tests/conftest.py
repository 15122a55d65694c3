"""Shared test fixtures."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from respec2html.browser import Session


@pytest.fixture(autouse=True)
def quiet_structlog() -> Generator[None, None, None]:
    """Keep log output off stdout and undo any configure_logging call."""
    structlog.configure(logger_factory=structlog.ReturnLoggerFactory())
    yield
    structlog.reset_defaults()


@pytest.fixture
def page() -> MagicMock:
    """Playwright page double with every awaited method mocked."""
    mock_page = MagicMock()
    mock_page.url = "https://example.org/spec.html?key=SECRET"
    mock_page.goto = AsyncMock()
    mock_page.content = AsyncMock(return_value="<html><head></head><body></body></html>")
    mock_page.evaluate = AsyncMock()
    mock_page.wait_for_function = AsyncMock()
    mock_page.wait_for_selector = AsyncMock()
    mock_page.expose_function = AsyncMock()
    mock_page.add_init_script = AsyncMock()
    return mock_page


@pytest.fixture
def session(page: MagicMock, tmp_path: Path) -> Session:
    """Session wrapping the page double."""
    return Session(context=MagicMock(), page=page, profile_dir=tmp_path / "profile")

