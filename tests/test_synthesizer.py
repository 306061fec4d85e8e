from bashtestmd.synthesizer import synthesize
from bashtestmd.types import Command, SynthesisOptions, TagSet


def _tags(**kwargs: object) -> TagSet:
    return TagSet(selection_tag="t", **kwargs)  # type: ignore[arg-type]


def test_default_checks_exit_status_zero() -> None:
    statement = synthesize(Command(text="ls", line=3), _tags())

    assert statement == (
        "echo 'Running: ls'",
        "bashtestmd_status=0",
        "{",
        "ls",
        "} || bashtestmd_status=$?",
        'if [ "$bashtestmd_status" -ne 0 ]; then',
        "    bashtestmd_fail 'line 3: expected exit code 0, got '\"$bashtestmd_status\"",
        "fi",
    )


def test_exit_code_ignore_skips_check() -> None:
    statement = synthesize(Command(text="false", line=1), _tags(exit_code_ignore=True))

    assert statement == ("echo 'Running: false'", "{", "false", "} || true")


def test_explicit_exit_code() -> None:
    statement = synthesize(Command(text="exit 2", line=1), _tags(exit_code=2))

    assert 'if [ "$bashtestmd_status" -ne 2 ]; then' in statement
    assert not any("-ne 0" in line for line in statement)


def test_compare_output_checks_expected_text() -> None:
    statement = synthesize(Command(text="echo hi", expected_output=("hi",), line=4), _tags(compare_output=True))

    assert "bashtestmd_output=$(" in statement
    assert ") || bashtestmd_status=$?" in statement
    assert "bashtestmd_expected=hi" in statement
    assert 'if [ "$bashtestmd_output" != "$bashtestmd_expected" ]; then' in statement
    assert 'if [ "$bashtestmd_status" -ne 0 ]; then' in statement


def test_compare_output_uses_changed_expectation() -> None:
    statement = synthesize(Command(text="echo hi", expected_output=("bye",), line=4), _tags(compare_output=True))

    assert "bashtestmd_expected=bye" in statement
    assert "bashtestmd_expected=hi" not in statement


def test_compare_output_joins_lines_and_quotes() -> None:
    command = Command(text="printf x", expected_output=("it's", "two words", ""), line=1)

    statement = synthesize(command, _tags(compare_output=True, exit_code_ignore=True))

    assert "bashtestmd_expected='it'\"'\"'s\ntwo words'" in statement
    assert not any("-ne" in line for line in statement)


def test_long_running_pauses_fixed_time() -> None:
    statement = synthesize(Command(text="./server", line=9), _tags(long_running=True))

    assert statement[1:] == ("{", "./server", "} &", "sleep 120")
    assert not any("bashtestmd_wait_until" in line for line in statement)


def test_long_running_wait_until_polls_instead_of_sleeping() -> None:
    options = SynthesisOptions(wait_timeout=60, poll_interval=2)
    statement = synthesize(
        Command(text="./server", line=9), _tags(long_running=True, wait_until="Listening on"), options
    )

    assert "sleep 120" not in statement
    assert '} >"$bashtestmd_output_file" 2>&1 &' in statement
    assert statement[-1] == "bashtestmd_wait_until $! \"$bashtestmd_output_file\" 'Listening on' 60 2 'line 9'"


def test_long_running_has_no_exit_check() -> None:
    statement = synthesize(Command(text="./server", line=1), _tags(long_running=True, exit_code=1))
    assert not any("bashtestmd_status" in line for line in statement)


def test_wait_until_ignored_without_long_running() -> None:
    statement = synthesize(Command(text="ls", line=1), _tags(wait_until="ready"))

    assert not any("wait_until" in line for line in statement)
    assert 'if [ "$bashtestmd_status" -ne 0 ]; then' in statement


def test_raw_text_is_emitted_verbatim_as_one_unit() -> None:
    text = "cat <<EOF\n$HOME is 'here'\n\nEOF"

    statement = synthesize(Command(text=text, line=2), _tags(raw=True, exit_code=0))

    assert statement[2:7] == ("{", "cat <<EOF", "$HOME is 'here'", "", "EOF")
    assert statement[7] == "} || bashtestmd_status=$?"
    assert statement.count("fi") == 1


def test_announcement_is_shell_quoted() -> None:
    statement = synthesize(Command(text="echo 'a b'", line=1), _tags())
    assert statement[0] == "echo 'Running: echo '\"'\"'a b'\"'\"''"
