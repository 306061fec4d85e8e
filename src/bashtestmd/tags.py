"""Block header parsing and selection."""

from __future__ import annotations

import re
from enum import Enum

from loguru import logger

from bashtestmd.errors import (
    ConflictingTagsError,
    InvalidTagValueError,
    MissingTagValueError,
    UnknownTagError,
)
from bashtestmd.types import CodeBlock, TagSet

TAG_PREFIX = "bashtestmd:"
SHELL_LANGUAGE = "sh"
EXIT_CODE_RE = re.compile(r"^[0-9]+$")
MAX_EXIT_CODE = 255


class ModifierKind(Enum):
    """Closed set of modifier tags understood in a block header."""

    COMPARE_OUTPUT = "compare-output"
    EXIT_CODE_IGNORE = "exit-code-ignore"
    EXIT_CODE = "exit-code"
    LONG_RUNNING = "long-running"
    WAIT_UNTIL = "wait-until"
    RAW = "raw"

    @property
    def takes_value(self) -> bool:
        return self in (ModifierKind.EXIT_CODE, ModifierKind.WAIT_UNTIL)


_KINDS_BY_NAME = {kind.value: kind for kind in ModifierKind}


def split_header(header: str) -> list[str]:
    """Split a header on commas that are not inside double quotes."""

    tokens: list[str] = []
    current: list[str] = []
    quoted = False
    for char in header:
        if char == '"':
            quoted = not quoted
        if char == "," and not quoted:
            tokens.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tokens.append("".join(current).strip())
    return tokens


def classify(block: CodeBlock, selection_tag: str) -> TagSet | None:
    """Return the block's tags, or None when the block is not selected."""

    tokens = split_header(block.header)
    if tokens[0] != SHELL_LANGUAGE or len(tokens) < 2 or tokens[1] != selection_tag:
        logger.debug("classify.skipped line={} header={}", block.line, block.header)
        return None
    return parse_header(block.header, line=block.line)


def parse_header(header: str, *, line: int = 0) -> TagSet:
    """Parse ``sh,<selection-tag>(,bashtestmd:<name>(="<value>")?)*`` into a TagSet.

    Args:
        header: Text following the opening fence.
        line: Block start line, attached to any error raised.

    Raises:
        UnknownTagError: A modifier outside the recognized set.
        MissingTagValueError: ``exit-code`` or ``wait-until`` without a value.
        InvalidTagValueError: A value that cannot be used for its tag.
        ConflictingTagsError: Mutually exclusive tags on the same block.
    """

    tokens = split_header(header)
    if header.count('"') % 2:
        name, _, value = tokens[-1].removeprefix(TAG_PREFIX).partition("=")
        raise InvalidTagValueError(name, value, "unterminated quote", line=line)
    selection_tag = tokens[1] if len(tokens) > 1 else ""
    flags: set[ModifierKind] = set()
    values: dict[ModifierKind, str] = {}

    for token in tokens[2:]:
        if not token:
            continue
        kind, value = parse_modifier(token, line=line)
        if value is None:
            flags.add(kind)
            continue
        previous = values.get(kind)
        if previous is not None and previous != value:
            raise ConflictingTagsError(
                f'{kind.value}="{previous}"', f'{kind.value}="{value}"', line=line
            )
        values[kind] = value

    if ModifierKind.RAW in flags and ModifierKind.COMPARE_OUTPUT in flags:
        raise ConflictingTagsError(ModifierKind.RAW.value, ModifierKind.COMPARE_OUTPUT.value, line=line)
    if ModifierKind.EXIT_CODE_IGNORE in flags and ModifierKind.EXIT_CODE in values:
        raise ConflictingTagsError(ModifierKind.EXIT_CODE_IGNORE.value, ModifierKind.EXIT_CODE.value, line=line)

    exit_code = values.get(ModifierKind.EXIT_CODE)
    tags = TagSet(
        selection_tag=selection_tag,
        compare_output=ModifierKind.COMPARE_OUTPUT in flags,
        exit_code_ignore=ModifierKind.EXIT_CODE_IGNORE in flags,
        exit_code=int(exit_code) if exit_code is not None else None,
        long_running=ModifierKind.LONG_RUNNING in flags,
        wait_until=values.get(ModifierKind.WAIT_UNTIL),
        raw=ModifierKind.RAW in flags,
    )
    _warn_ignored(tags, line)
    return tags


def parse_modifier(token: str, *, line: int = 0) -> tuple[ModifierKind, str | None]:
    """Parse one ``bashtestmd:<name>(=<value>)?`` token."""

    if not token.startswith(TAG_PREFIX):
        raise UnknownTagError(token, line=line)
    name, sep, raw_value = token[len(TAG_PREFIX) :].partition("=")
    kind = _KINDS_BY_NAME.get(name.strip())
    if kind is None:
        raise UnknownTagError(name.strip(), line=line)

    if not kind.takes_value:
        if sep:
            raise InvalidTagValueError(kind.value, raw_value, "tag takes no value", line=line)
        return kind, None

    if not sep:
        raise MissingTagValueError(kind.value, line=line)
    value = raw_value.strip()
    if value.startswith('"') and (len(value) < 2 or not value.endswith('"')):
        raise InvalidTagValueError(kind.value, value, "unterminated quote", line=line)
    value = _unquote(value)
    if kind is ModifierKind.EXIT_CODE and EXIT_CODE_RE.match(value) is None:
        raise InvalidTagValueError(kind.value, value, "expected a non-negative integer", line=line)
    if kind is ModifierKind.EXIT_CODE and int(value) > MAX_EXIT_CODE:
        raise InvalidTagValueError(kind.value, value, f"expected 0-{MAX_EXIT_CODE}", line=line)
    if kind is ModifierKind.WAIT_UNTIL and not value:
        raise InvalidTagValueError(kind.value, value, "expected non-empty text", line=line)
    return kind, value


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def _warn_ignored(tags: TagSet, line: int) -> None:
    if tags.wait_until is not None and not tags.long_running:
        logger.warning("tags.ignored line={} tag=wait-until reason=requires long-running", line)
    if tags.long_running and tags.compare_output:
        logger.warning("tags.ignored line={} tag=compare-output reason=long-running", line)
    if tags.long_running and (tags.exit_code_ignore or tags.exit_code is not None):
        logger.warning("tags.ignored line={} tag=exit-code reason=long-running", line)
