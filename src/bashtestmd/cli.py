"""bashtestmd command line."""

from __future__ import annotations

import stat
from pathlib import Path
from typing import NoReturn

import typer
from loguru import logger

from bashtestmd.assembler import generate
from bashtestmd.config import load_settings
from bashtestmd.errors import BashTestMdError
from bashtestmd.logging_utils import configure_logging

app = typer.Typer(
    name="bashtestmd",
    help="Compile tagged shell blocks of a Markdown file into a bash test script.",
    add_completion=False,
)

STDOUT_MARKER = "-"


@app.command()
def main(
    input_path: Path = typer.Option(  # noqa: B008
        ..., "--input", "-i", exists=True, dir_okay=False, readable=True, help="Input Markdown file to parse"
    ),
    output_path: Path = typer.Option(..., "--output", "-o", help="Path to output bash script, '-' for stdout"),  # noqa: B008
    tag: str = typer.Option(..., "--tag", "-t", help="Only run code blocks with this tag"),
    wait_timeout: int | None = typer.Option(None, "--wait-timeout", min=1, help="Seconds to wait for wait-until text"),
    poll_interval: int | None = typer.Option(None, "--poll-interval", min=1, help="Seconds between wait-until polls"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level"),
) -> None:
    """Generate the script for every block tagged TAG."""

    settings = load_settings(wait_timeout=wait_timeout, poll_interval=poll_interval, log_level=log_level)
    configure_logging(settings.log_level, profile=settings.log_format)

    try:
        document = input_path.read_text(encoding="utf-8")
        script = generate(document, tag, settings.synthesis_options())
    except (BashTestMdError, UnicodeDecodeError, OSError) as exc:
        _fail(input_path, exc)

    if str(output_path) == STDOUT_MARKER:
        typer.echo(script, nl=False)
        return
    try:
        output_path.write_text(script, encoding="utf-8")
        output_path.chmod(output_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as exc:
        _fail(output_path, exc)
    logger.info("cli.written output={} bytes={}", output_path, len(script.encode("utf-8")))


def _fail(path: Path, exc: Exception) -> NoReturn:
    logger.error("cli.error path={} error={}", path, exc)
    typer.echo(f"error: {path}: {exc}", err=True)
    raise typer.Exit(1) from exc
