"""Script assembly and the document-to-script pipeline."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from bashtestmd.interpreter import PROMPT, interpret
from bashtestmd.scanner import scan_blocks
from bashtestmd.synthesizer import synthesize
from bashtestmd.tags import classify
from bashtestmd.types import ScriptStatement, SynthesisOptions

PREAMBLE = r"""#!/usr/bin/env bash
# Generated by bashtestmd. Do not edit by hand.
set -o errexit
# Allow aliases defined by earlier commands, as in an interactive shell.
shopt -s expand_aliases

bashtestmd_outputs=()

bashtestmd_descendants() {
    local child
    command -v pgrep >/dev/null 2>&1 || return 0
    for child in $(pgrep -P "$1" 2>/dev/null); do
        echo "$child"
        bashtestmd_descendants "$child"
    done
}

# Background jobs run in subshells, so their whole process tree is killed.
bashtestmd_cleanup() {
    local job pids=""
    for job in $(jobs -p); do
        pids="$pids $job $(bashtestmd_descendants "$job")"
    done
    if [ -n "${pids//[[:space:]]/}" ]; then
        kill $pids 2>/dev/null || true
    fi
}
trap bashtestmd_cleanup EXIT

bashtestmd_dump_long_running_output() {
    local output
    for output in "${bashtestmd_outputs[@]}"; do
        if [ -f "$output" ]; then
            echo "Output of the long running task ($output):" >&2
            cat "$output" >&2
        fi
    done
}

bashtestmd_fail() {
    echo "bashtestmd: $1" >&2
    bashtestmd_dump_long_running_output
    exit 1
}

bashtestmd_wait_until() {
    local pid=$1 output=$2 pattern=$3 timeout=$4 interval=$5 label=$6
    local deadline=$((SECONDS + timeout))
    echo "Waiting for process $pid to print '$pattern' (timeout ${timeout}s)"
    until grep -q -i -F -e "$pattern" "$output"; do
        if ! kill -0 "$pid" 2>/dev/null && ! grep -q -i -F -e "$pattern" "$output"; then
            bashtestmd_fail "$label: background process exited before printing '$pattern'"
        fi
        if [ "$SECONDS" -ge "$deadline" ]; then
            bashtestmd_fail "$label: WaitTimeout after ${timeout}s waiting for '$pattern'"
        fi
        sleep "$interval"
    done
    echo "Found '$pattern'"
}
"""

TRAILER = """echo "All tests passed!"
exit 0
"""


def assemble(statements: Iterable[ScriptStatement]) -> str:
    """Join statements between the preamble and the success trailer."""

    parts = [PREAMBLE, *("\n".join(statement) for statement in statements), TRAILER]
    return "\n\n".join(part.rstrip("\n") for part in parts) + "\n"


def generate(document: str, selection_tag: str, options: SynthesisOptions | None = None) -> str:
    """Build the script for every block of ``document`` tagged ``selection_tag``.

    Raises:
        BashTestMdError: On a malformed document or an invalid block header.
            Nothing is returned in that case.
    """

    options = options or SynthesisOptions()
    statements: list[ScriptStatement] = []
    selected = 0
    for block in scan_blocks(document):
        tags = classify(block, selection_tag)
        if tags is None:
            continue
        selected += 1
        commands = interpret(block.body, tags, first_line=block.line + 1)
        if not commands:
            logger.warning(
                "interpret.no_command line={} hint=remove tag {} or start a line with '{} '",
                block.line,
                selection_tag,
                PROMPT,
            )
        statements.extend(synthesize(command, tags, options) for command in commands)

    logger.info("generate.done tag={} blocks={} commands={}", selection_tag, selected, len(statements))
    return assemble(statements)
