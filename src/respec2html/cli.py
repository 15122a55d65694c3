"""CLI module for respec2html."""

import asyncio
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from respec2html import __version__
from respec2html.config import DEFAULT_TIMEOUT_MS, RenderOptions
from respec2html.errors import RenderError
from respec2html.logging import configure_logging, get_logger
from respec2html.pipeline import fetch_and_write
from respec2html.validation import ValidationError, validate_source

# Markup may go to stdout, so everything else goes to stderr
console = Console(stderr=True)

app = typer.Typer(
    name="respec2html",
    help="Render a ReSpec document to static HTML.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: Whether the version flag was provided.
    """
    if value:
        console.print(f"respec2html version {__version__}")
        raise typer.Exit()


def describe_detail(detail: Any) -> str:
    """Turn a ReSpec error or warning detail into one readable line."""
    if isinstance(detail, dict):
        message = str(detail.get("message", detail))
        plugin = detail.get("plugin")
        hint = detail.get("hint")
        text = f"({plugin}) {message}" if plugin else message
        return f"{text} {hint}" if hint else text
    return str(detail)


@app.command()
def main(
    src: Annotated[
        str, typer.Option("--src", "-s", help="URL or path of the ReSpec source.")
    ],
    out: Annotated[
        str | None,
        typer.Option("--out", "-o", help="Path to write to. Defaults to stdout."),
    ] = None,
    timeout: Annotated[
        int, typer.Option("--timeout", "-t", min=1, help="Timeout in seconds.")
    ] = DEFAULT_TIMEOUT_MS // 1000,
    halt_on_error: Annotated[
        bool,
        typer.Option("--haltonerror", "-e", help="Abort without writing on ReSpec errors."),
    ] = False,
    halt_on_warn: Annotated[
        bool,
        typer.Option("--haltonwarn", "-w", help="Abort without writing on ReSpec warnings."),
    ] = False,
    disable_sandbox: Annotated[
        bool, typer.Option("--disable-sandbox", help="Disable the Chromium sandbox.")
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", help="Open a headed browser with devtools.")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output")
    ] = False,
    _version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Render a ReSpec document to static HTML."""
    configure_logging(verbose=verbose)
    log = get_logger()

    try:
        source = validate_source(src)
    except ValidationError as e:
        log.error("Invalid source", source=src, error=e.message)
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(code=1) from None

    errors: list[Any] = []
    warnings: list[Any] = []

    def on_error(detail: Any) -> None:
        errors.append(detail)
        console.print(f"[red]ReSpec error:[/red] {escape(describe_detail(detail))}")

    def on_warning(detail: Any) -> None:
        warnings.append(detail)
        console.print(f"[yellow]ReSpec warning:[/yellow] {escape(describe_detail(detail))}")

    def before_write() -> None:
        if halt_on_error and errors:
            console.print(f"[red]Halting:[/red] {len(errors)} ReSpec error(s).")
            raise typer.Exit(code=1)
        if halt_on_warn and warnings:
            console.print(f"[yellow]Halting:[/yellow] {len(warnings)} ReSpec warning(s).")
            raise typer.Exit(code=1)

    options = RenderOptions(
        timeout=timeout * 1000,
        disable_sandbox=disable_sandbox,
        debug=debug,
        on_error=on_error,
        on_warning=on_warning,
        before_write=before_write,
    )

    try:
        asyncio.run(fetch_and_write(source, out, options))
    except RenderError as e:
        log.error("Render failed", url=e.url, error_type=type(e).__name__)
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(code=1) from None


if __name__ == "__main__":
    app()
