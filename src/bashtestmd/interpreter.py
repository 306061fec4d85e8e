"""Split block bodies into commands and expected output."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from loguru import logger

from bashtestmd.types import Command, TagSet

PROMPT = "$"


def command_text(line: str) -> str | None:
    """Return the command on a prompt line, or None for any other line.

    The prompt and exactly one following space are removed.
    """

    stripped = line.lstrip()
    if not stripped.startswith(PROMPT):
        return None
    text = stripped[len(PROMPT) :]
    return text[1:] if text.startswith(" ") else text


@dataclass
class _Pending:
    line: int
    lines: list[str]
    trailing: list[str] = field(default_factory=list)


def interpret(lines: Sequence[str], tags: TagSet, *, first_line: int = 1) -> list[Command]:
    """Classify body lines into commands.

    Args:
        lines: Block body lines.
        tags: Tags of the block the lines belong to.
        first_line: Document line number of ``lines[0]``.

    Returns:
        Commands in body order. Raw blocks fold every line up to the next
        prompt into the command; other blocks keep those lines as expected
        output when ``compare_output`` is set and drop them otherwise.
    """

    commands: list[Command] = []
    pending: _Pending | None = None
    for offset, line in enumerate(lines):
        text = command_text(line)
        if text is not None:
            _flush(pending, tags, commands)
            pending = _Pending(line=first_line + offset, lines=[text])
        elif pending is None:
            continue
        elif tags.raw:
            pending.lines.append(line)
        else:
            pending.trailing.append(line)
    _flush(pending, tags, commands)
    return commands


def _flush(pending: _Pending | None, tags: TagSet, commands: list[Command]) -> None:
    if pending is None:
        return
    text = "\n".join(pending.lines)
    if not text.strip():
        logger.warning("interpret.empty_command line={}", pending.line)
        return
    expected = tuple(pending.trailing) if tags.compare_output and not tags.raw else None
    commands.append(Command(text=text, expected_output=expected, line=pending.line))
