"""Delivery of rendered markup."""

from __future__ import annotations

import sys
from pathlib import Path

from respec2html.errors import OutputWriteError
from respec2html.logging import get_logger

STDOUT_PATH = "<stdout>"


def write_to(out_path: str, data: str) -> Path:
    """Write data as UTF-8 to a path, replacing any existing file.

    Relative paths are resolved against the current working directory.

    Returns:
        The absolute path written.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    path = Path(out_path)
    if not path.is_absolute():
        path = Path.cwd() / path
    try:
        path.write_text(data, encoding="utf-8")
    except (OSError, UnicodeError) as e:
        get_logger().error("Failed to write output", path=str(path), error=str(e))
        raise OutputWriteError(str(path), str(e)) from e
    return path


def deliver(markup: str, destination: str | None) -> None:
    """Send markup to its destination.

    Args:
        markup: The rendered HTML.
        destination: None writes to stdout, "" writes nothing, anything
            else is a file path.

    Raises:
        OutputWriteError: If stdout or the file cannot be written.
    """
    log = get_logger()
    if destination is None:
        try:
            sys.stdout.write(markup)
            sys.stdout.flush()
        except (OSError, UnicodeError) as e:
            log.error("Failed to write output", path=STDOUT_PATH, error=str(e))
            raise OutputWriteError(STDOUT_PATH, str(e)) from e
        log.debug("Wrote markup to stdout", length=len(markup))
    elif destination == "":
        log.debug("Skipping output, returning markup only")
    else:
        path = write_to(destination, markup)
        log.info("Wrote markup", path=str(path), length=len(markup))
