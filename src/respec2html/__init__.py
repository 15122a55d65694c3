"""Render ReSpec documents to static HTML with a headless browser."""

from respec2html.config import RenderOptions
from respec2html.errors import (
    DeadlineExceededError,
    DocumentNotReadyError,
    ExtractionUnavailableError,
    NavigationError,
    NotExpectedDocumentError,
    OutputWriteError,
    RenderError,
    SessionAcquisitionError,
    TransportError,
)
from respec2html.pipeline import RenderRequest, fetch_and_write, render

__version__ = "0.1.0"

__all__ = [
    "DeadlineExceededError",
    "DocumentNotReadyError",
    "ExtractionUnavailableError",
    "NavigationError",
    "NotExpectedDocumentError",
    "OutputWriteError",
    "RenderError",
    "RenderOptions",
    "RenderRequest",
    "SessionAcquisitionError",
    "TransportError",
    "fetch_and_write",
    "render",
]
