"""Tests for the detection module."""

from unittest.mock import MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from respec2html.config import READY_STATE_TIMEOUT_MS, SETTLE_WINDOW_MS
from respec2html.detection import (
    ensure_respec_document,
    has_respec_script,
    is_respec_document,
)
from respec2html.errors import NotExpectedDocumentError

RESPEC_HTML = """
<html>
  <head>
    <script src="https://www.w3.org/Tools/respec/respec-w3c" class="remove" defer></script>
  </head>
  <body></body>
</html>
"""

PLAIN_HTML = "<html><head><title>Plain</title></head><body></body></html>"


class TestHasRespecScript:
    """Tests for has_respec_script function."""

    def test_detects_respec_src(self) -> None:
        """Test a script loading respec is recognised."""
        assert has_respec_script(RESPEC_HTML) is True

    def test_detects_profile_data_main(self) -> None:
        """Test the RequireJS profile bootstrap is recognised."""
        html = (
            '<html><head><script data-main="js/profile-w3c" src="js/require.js">'
            "</script></head></html>"
        )
        assert has_respec_script(html) is True

    def test_plain_document(self) -> None:
        """Test documents without ReSpec are not recognised."""
        assert has_respec_script(PLAIN_HTML) is False

    def test_ignores_body_scripts(self) -> None:
        """Test only scripts in the head count."""
        html = '<html><head></head><body><script src="respec.js"></script></body></html>'
        assert has_respec_script(html) is False


class TestIsRespecDocument:
    """Tests for is_respec_document function."""

    @pytest.mark.asyncio
    async def test_structural_match_skips_waiting(self, page: MagicMock) -> None:
        """Test a head script is enough, without the settle window."""
        page.content.return_value = RESPEC_HTML

        assert await is_respec_document(page) is True

        page.wait_for_function.assert_not_awaited()
        page.wait_for_selector.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_to_respec_ui(self, page: MagicMock) -> None:
        """Test the ReSpec UI appearing within the settle window counts."""
        page.content.return_value = PLAIN_HTML

        assert await is_respec_document(page) is True

        page.wait_for_function.assert_awaited_once_with(
            "() => document.readyState === 'complete'",
            timeout=READY_STATE_TIMEOUT_MS,
        )
        page.wait_for_selector.assert_awaited_once_with(
            "#respec-ui", state="attached", timeout=SETTLE_WINDOW_MS
        )

    @pytest.mark.asyncio
    async def test_no_respec_ui_within_settle_window(self, page: MagicMock) -> None:
        """Test a page without the ReSpec UI is rejected."""
        page.content.return_value = PLAIN_HTML
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 2000ms")

        assert await is_respec_document(page) is False

    @pytest.mark.asyncio
    async def test_never_completes_loading(self, page: MagicMock) -> None:
        """Test a page that never finishes loading is rejected."""
        page.content.return_value = PLAIN_HTML
        page.wait_for_function.side_effect = PlaywrightTimeoutError("Timeout 30000ms")

        assert await is_respec_document(page) is False
        page.wait_for_selector.assert_not_awaited()


class TestEnsureRespecDocument:
    """Tests for ensure_respec_document function."""

    @pytest.mark.asyncio
    async def test_passes_for_respec(self, page: MagicMock) -> None:
        """Test ReSpec documents pass."""
        page.content.return_value = RESPEC_HTML
        await ensure_respec_document(page)

    @pytest.mark.asyncio
    async def test_raises_with_redacted_url(self, page: MagicMock) -> None:
        """Test other documents fail with the URL minus its query."""
        page.content.return_value = PLAIN_HTML
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 2000ms")

        with pytest.raises(NotExpectedDocumentError) as exc_info:
            await ensure_respec_document(page)

        assert exc_info.value.url == "https://example.org/spec.html"
        assert "SECRET" not in str(exc_info.value)
