"""Validation utilities for render sources."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import ParseResult, urlparse

SUPPORTED_SCHEMES = {"http", "https", "file"}


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def validate_source(value: str, field_name: str = "src") -> str:
    """Validate a render source and normalize it to a URL.

    Values without a scheme are treated as filesystem paths, resolved
    against the current working directory and turned into file:// URLs.

    Args:
        value: URL or path of the document.
        field_name: Name of the field for error messages.

    Returns:
        An absolute URL.

    Raises:
        ValidationError: If the value is empty or uses an unsupported scheme.
    """
    stripped = value.strip()
    if not stripped:
        raise ValidationError(field_name, "cannot be empty")

    parsed = urlparse(stripped)
    # A single letter is a Windows drive, not a scheme
    if not parsed.scheme or len(parsed.scheme) == 1:
        return Path(stripped).resolve().as_uri()

    if parsed.scheme.lower() not in SUPPORTED_SCHEMES:
        raise ValidationError(
            field_name,
            f"unsupported URL scheme '{parsed.scheme}' "
            f"(expected one of: {', '.join(sorted(SUPPORTED_SCHEMES))})",
        )
    if parsed.scheme.lower() != "file" and not parsed.netloc:
        raise ValidationError(field_name, "URL must include a host")

    return stripped


def redact_url(url: str) -> str:
    """Return origin and path of a URL.

    Query parameters may carry API keys and the userinfo part may carry
    a password, so neither ever appears in messages or logs.
    """
    parsed = urlparse(url)
    return parsed._replace(
        netloc=_origin_netloc(parsed), params="", query="", fragment=""
    ).geturl()


def scrub_url(text: str, url: str) -> str:
    """Replace every occurrence of url in text with its redacted form.

    Browser messages may quote the URL whole, or without its fragment
    or query, so each of those forms is replaced.
    """
    public_url = redact_url(url)
    if not url or url == public_url:
        return text
    parsed = urlparse(url)
    forms = {
        url,
        parsed._replace(fragment="").geturl(),
        parsed._replace(params="", query="", fragment="").geturl(),
    }
    for form in sorted(forms, key=len, reverse=True):
        if form != public_url:
            text = text.replace(form, public_url)
    return text


def _origin_netloc(parsed: ParseResult) -> str:
    """Host and port of a parsed URL, without any user:password@ part."""
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    try:
        port = parsed.port
    except ValueError:
        port = None
    return f"{host}:{port}" if port is not None else host
