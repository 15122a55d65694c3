"""Exceptions raised while rendering a document."""


class RenderError(Exception):
    """Base exception for every fatal render failure."""

    def __init__(self, message: str, url: str = "") -> None:
        """Initialize RenderError.

        Args:
            message: Error description.
            url: Redacted (origin + path) URL of the document being rendered.
        """
        self.message = message
        self.url = url
        super().__init__(message)


class SessionAcquisitionError(RenderError):
    """Raised when the browser session cannot be started."""


class TransportError(RenderError):
    """Raised when the document is served with a failing HTTP status."""

    def __init__(self, status: int, url: str) -> None:
        self.status = status
        super().__init__(f"HTTP Error {status}: {url}", url)


class DeadlineExceededError(RenderError):
    """Raised when the render budget runs out at a suspension point."""

    def __init__(self, phase: str, timeout_ms: float, url: str = "") -> None:
        self.phase = phase
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Timeout: {phase} didn't complete within {timeout_ms:.0f}ms.", url
        )


class NavigationError(RenderError):
    """Raised when the document cannot be loaded at all (DNS, refused, aborted)."""


class NotExpectedDocumentError(RenderError):
    """Raised when the loaded page is not a ReSpec document."""

    def __init__(self, url: str) -> None:
        super().__init__(
            f"That doesn't seem to be a ReSpec document. Please check manually: {url}",
            url,
        )


class DocumentNotReadyError(RenderError):
    """Raised when the document's readiness promise rejects."""


class ExtractionUnavailableError(RenderError):
    """Raised when the document's export routine is missing or fails."""

    def __init__(self, url: str, version: str, upstream: str) -> None:
        self.version = version
        self.upstream = upstream
        message = (
            "Sorry, there was an error generating the HTML. Please report this issue!\n"
            f"Specification: {url}\n"
            f"ReSpec version: {version}\n"
            "File a bug: https://github.com/w3c/respec/\n"
            f"Error: {upstream}"
        )
        super().__init__(message, url)


class OutputWriteError(RenderError):
    """Raised when the rendered markup cannot be written to disk."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not write {path}: {reason}")
