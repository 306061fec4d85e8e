"""Shared core dataclasses."""

from __future__ import annotations

from dataclasses import dataclass

# One command's worth of shell lines, in emission order.
ScriptStatement = tuple[str, ...]

LONG_RUNNING_PAUSE_SECONDS = 120


@dataclass(frozen=True)
class CodeBlock:
    """Fenced block found in a document."""

    index: int
    line: int
    header: str
    body: tuple[str, ...]

    @property
    def language(self) -> str:
        return self.header.split(",", 1)[0].strip()


@dataclass(frozen=True)
class TagSet:
    """Tags declared on one block header."""

    selection_tag: str
    compare_output: bool = False
    exit_code_ignore: bool = False
    exit_code: int | None = None
    long_running: bool = False
    wait_until: str | None = None
    raw: bool = False

    @property
    def expected_exit_code(self) -> int | None:
        """Status the command must exit with, or None when it is not checked."""

        if self.exit_code_ignore:
            return None
        if self.exit_code is not None:
            return self.exit_code
        return 0


@dataclass(frozen=True)
class Command:
    """One logical shell invocation taken from a block body."""

    text: str
    expected_output: tuple[str, ...] | None = None
    line: int = 0


@dataclass(frozen=True)
class SynthesisOptions:
    """Runtime bounds baked into the generated script."""

    wait_timeout: int = 300
    poll_interval: int = 5
    long_running_pause: int = LONG_RUNNING_PAUSE_SECONDS
