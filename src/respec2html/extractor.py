"""Version-gated extraction of the rendered markup.

ReSpec 20.10.0 introduced the ``core/exporter`` module. Older documents
only provide ``ui/save-html``. The protocol is chosen once from the
version the document reports.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import NamedTuple
from urllib.parse import unquote

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from respec2html.deadline import Deadline, race
from respec2html.errors import ExtractionUnavailableError
from respec2html.logging import get_logger
from respec2html.validation import redact_url, scrub_url

DEVELOPER_EDITION_LABEL = "Developer Edition"

VERSION_SCRIPT = "() => String(window.respecVersion)"

LEGACY_EXPORT_SCRIPT = """
() => new Promise((resolve, reject) => {
  require(
    ["ui/save-html"],
    ({ exportDocument }) => resolve(exportDocument("html", "text/html")),
    (err) => reject(new Error(err.message)),
  );
})
"""

MODERN_EXPORT_SCRIPT = """
() => new Promise((resolve, reject) => {
  require(
    ["core/exporter"],
    ({ rsDocToDataURL }) => resolve(rsDocToDataURL("text/html")),
    (err) => reject(new Error(err.message)),
  );
})
"""

DATA_URL_PREFIX = re.compile(r"^data:\w+/\w+;charset=utf-8,")
_LEADING_DIGITS = re.compile(r"^\s*[+-]?\d+")


class EngineVersion(NamedTuple):
    """ReSpec version as a comparable (major, minor, patch) triple."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, raw: str) -> EngineVersion:
        """Parse a version string reported by the document.

        Each dotted component contributes its leading digits, so
        "26.4.1-beta" parses as (26, 4, 1). Missing or non-numeric
        components count as 0. The developer build has no version and
        sorts above every release.
        """
        if raw.strip() == DEVELOPER_EDITION_LABEL:
            return DEVELOPER_EDITION
        parts = [_leading_int(part) for part in raw.split(".")[:3]]
        parts += [0] * (3 - len(parts))
        return cls(*parts)

    def __str__(self) -> str:
        if self == DEVELOPER_EDITION:
            return DEVELOPER_EDITION_LABEL
        return f"{self.major}.{self.minor}.{self.patch}"


DEVELOPER_EDITION = EngineVersion(123456789, 0, 0)
MODERN_EXPORTER_VERSION = EngineVersion(20, 10, 0)


class ExportProtocol(Enum):
    """How the markup is pulled out of the document."""

    LEGACY = "ui/save-html"
    MODERN = "core/exporter"


def select_protocol(version: EngineVersion) -> ExportProtocol:
    """Pick the export protocol for a ReSpec version."""
    if version < MODERN_EXPORTER_VERSION:
        return ExportProtocol.LEGACY
    return ExportProtocol.MODERN


def decode_data_url(data_url: str) -> str:
    """Recover markup from a percent-encoded ``data:`` URL."""
    return unquote(DATA_URL_PREFIX.sub("", data_url, count=1))


async def detect_version(page: Page) -> EngineVersion:
    """Read and parse window.respecVersion."""
    raw = await page.evaluate(VERSION_SCRIPT)
    version = EngineVersion.parse(raw)
    get_logger().info("ReSpec version detected", version=str(version))
    return version


async def extract(
    page: Page, version: EngineVersion, source_url: str, deadline: Deadline
) -> str:
    """Export the processed document as HTML.

    Args:
        page: Page holding the processed document.
        version: Version reported by the document.
        source_url: URL the document was loaded from.
        deadline: Budget shared by the whole render.

    Returns:
        The serialized markup.

    Raises:
        ExtractionUnavailableError: If the export module cannot be loaded
            or fails.
        DeadlineExceededError: If the budget runs out first.
    """
    log = get_logger()
    public_url = redact_url(source_url)
    protocol = select_protocol(version)
    log.debug("Exporting document", protocol=protocol.value, version=str(version))

    if protocol is ExportProtocol.LEGACY:
        log.warning(
            "Ye Olde ReSpec version detected! Please update to 20.10.0 or above.",
            version=str(version),
        )
        script = LEGACY_EXPORT_SCRIPT
    else:
        script = MODERN_EXPORT_SCRIPT

    try:
        exported = await race(page.evaluate(script), deadline, "export", public_url)
    except PlaywrightError as e:
        reason = scrub_url(e.message, source_url)
        log.error("Export failed", url=public_url, version=str(version), error=reason)
        raise ExtractionUnavailableError(public_url, str(version), reason) from e

    if protocol is ExportProtocol.LEGACY:
        return str(exported)
    return decode_data_url(str(exported))


def _leading_int(text: str) -> int:
    match = _LEADING_DIGITS.match(text)
    return int(match.group()) if match else 0
