"""Fenced code block scanning."""

from __future__ import annotations

import re
from collections.abc import Iterator

from loguru import logger

from bashtestmd.errors import MalformedDocumentError
from bashtestmd.types import CodeBlock

QUOTE_MARKER_RE = re.compile(r"^ {0,3}> ?")
# Indentation and list markers before the fence belong to the enclosing list item.
OPEN_FENCE_RE = re.compile(
    r"^(?P<indent> *(?:(?:[-+*]|[0-9]{1,9}[.)]) +)?)(?P<fence>`{3,}|~{3,})(?P<header>.*)$"
)
CLOSE_FENCE_RE = re.compile(r"^ *(?P<fence>`{3,}|~{3,})\s*$")


def scan_blocks(document: str) -> Iterator[CodeBlock]:
    """Yield every fenced block that declares a language, in source order.

    Fences nested in list items or block quotes are found too; the quote
    markers and the container indentation are removed from body lines.
    Blocks without a header are paired with their closing fence but not
    yielded. The first matching closing fence ends a block.

    Raises:
        MalformedDocumentError: If a fence is still open at the end of the document.
    """

    lines = document.splitlines()
    index = 0
    cursor = 0
    while cursor < len(lines):
        depth, text = strip_quote_markers(lines[cursor])
        opener = OPEN_FENCE_RE.match(text)
        if opener is None or (opener["fence"][0] == "`" and "`" in opener["header"]):
            cursor += 1
            continue

        start = cursor
        fence = opener["fence"]
        indent = len(opener["indent"])
        header = opener["header"].strip()
        body: list[str] = []
        cursor += 1
        while True:
            if cursor >= len(lines):
                raise MalformedDocumentError("unterminated fenced code block", line=start + 1)
            _, text = strip_quote_markers(lines[cursor], limit=depth)
            closer = CLOSE_FENCE_RE.match(text)
            if closer is not None and closer["fence"][0] == fence[0] and len(closer["fence"]) >= len(fence):
                break
            body.append(_strip_indent(text, indent))
            cursor += 1
        cursor += 1

        if not header:
            continue
        logger.debug("scan.block index={} line={} header={}", index, start + 1, header)
        yield CodeBlock(index=index, line=start + 1, header=header, body=tuple(body))
        index += 1


def strip_quote_markers(line: str, *, limit: int | None = None) -> tuple[int, str]:
    """Remove leading ``>`` block quote markers, at most ``limit`` of them."""

    depth = 0
    while limit is None or depth < limit:
        marker = QUOTE_MARKER_RE.match(line)
        if marker is None:
            break
        line = line[marker.end() :]
        depth += 1
    return depth, line


def _strip_indent(line: str, indent: int) -> str:
    if not indent:
        return line
    stripped = line.lstrip(" ")
    removed = len(line) - len(stripped)
    return line[min(removed, indent) :]
