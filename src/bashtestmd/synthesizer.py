"""Shell statements for one command under its block's tags."""

from __future__ import annotations

import shlex

from bashtestmd.types import Command, ScriptStatement, SynthesisOptions, TagSet

STATUS_VAR = "bashtestmd_status"
OUTPUT_VAR = "bashtestmd_output"
EXPECTED_VAR = "bashtestmd_expected"
OUTPUT_FILE_VAR = "bashtestmd_output_file"


def synthesize(command: Command, tags: TagSet, options: SynthesisOptions | None = None) -> ScriptStatement:
    """Render the bash lines that run ``command`` and check it.

    The command text is inserted unescaped. Nothing is executed here.
    """

    options = options or SynthesisOptions()
    lines = [f"echo {shlex.quote(f'Running: {command.text}')}"]
    body = command.text.split("\n")
    label = f"line {command.line}" if command.line else "command"

    if tags.long_running:
        if tags.wait_until is not None:
            lines.extend(_wait_until(body, tags.wait_until, label, options))
        else:
            lines.extend([*_background(body, ""), f"sleep {options.long_running_pause}"])
        return tuple(lines)

    expected_code = tags.expected_exit_code
    if tags.compare_output and not tags.raw:
        lines.extend([f"{STATUS_VAR}=0", f"{OUTPUT_VAR}=$(", *body, f") || {STATUS_VAR}=$?"])
        lines.extend(_exit_check(expected_code, label))
        lines.extend(_output_check(command.expected_output or (), label))
        return tuple(lines)

    if expected_code is None:
        lines.extend(["{", *body, "} || true"])
        return tuple(lines)

    lines.extend([f"{STATUS_VAR}=0", "{", *body, f"}} || {STATUS_VAR}=$?"])
    lines.extend(_exit_check(expected_code, label))
    return tuple(lines)


def _exit_check(expected_code: int | None, label: str) -> list[str]:
    if expected_code is None:
        return []
    message = shlex.quote(f"{label}: expected exit code {expected_code}, got ")
    return [
        f'if [ "${STATUS_VAR}" -ne {expected_code} ]; then',
        f'    bashtestmd_fail {message}"${STATUS_VAR}"',
        "fi",
    ]


def _output_check(expected_output: tuple[str, ...], label: str) -> list[str]:
    # Command substitution drops trailing newlines, so the expectation does too.
    expected = "\n".join(expected_output).rstrip("\n")
    return [
        f"{EXPECTED_VAR}={shlex.quote(expected)}",
        f'if [ "${OUTPUT_VAR}" != "${EXPECTED_VAR}" ]; then',
        '    echo "Expected output:" >&2',
        f"    printf '%s\\n' \"${EXPECTED_VAR}\" >&2",
        '    echo "Actual output:" >&2',
        f"    printf '%s\\n' \"${OUTPUT_VAR}\" >&2",
        f"    bashtestmd_fail {shlex.quote(f'{label}: output did not match')}",
        "fi",
    ]


def _wait_until(body: list[str], pattern: str, label: str, options: SynthesisOptions) -> list[str]:
    return [
        f"{OUTPUT_FILE_VAR}=$(mktemp)",
        f'bashtestmd_outputs+=("${OUTPUT_FILE_VAR}")',
        f"export BASHTESTMD_LONG_RUNNING_OUTPUT=${OUTPUT_FILE_VAR}",
        *_background(body, f' >"${OUTPUT_FILE_VAR}" 2>&1'),
        (
            f'bashtestmd_wait_until $! "${OUTPUT_FILE_VAR}" {shlex.quote(pattern)} '
            f"{options.wait_timeout} {options.poll_interval} {shlex.quote(label)}"
        ),
    ]


def _background(body: list[str], redirect: str) -> list[str]:
    # Grouped so `a; b` and trailing comments stay in the job; the preamble's
    # cleanup kills the group together with its descendants.
    return ["{", *body, f"}}{redirect} &"]
