from __future__ import annotations

import logging

import pytest
from loguru import logger

from bashtestmd import logging_utils
from bashtestmd.logging_utils import configure_logging


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_default_profile_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("info")

    logger.info("generate.done tag={}", "test-ci")
    logger.debug("scan.block index={}", 0)

    err = capsys.readouterr().err
    assert "INFO" in err
    assert "generate.done tag=test-ci" in err
    assert "scan.block" not in err


def test_rich_profile_uses_rich_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    handler = _CaptureHandler()
    monkeypatch.setattr(logging_utils, "_build_rich_handler", lambda: handler)

    configure_logging("WARNING", profile="rich")
    logger.warning("tags.ignored line={}", 3)
    logger.info("generate.done")

    assert handler.messages == ["tags.ignored line=3"]


def test_rich_handler_targets_stderr() -> None:
    handler = logging_utils._build_rich_handler()
    assert handler.console.stderr is True  # type: ignore[attr-defined]


def test_configure_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    built: list[_CaptureHandler] = []

    def _build() -> _CaptureHandler:
        built.append(_CaptureHandler())
        return built[-1]

    monkeypatch.setattr(logging_utils, "_build_rich_handler", _build)

    configure_logging("INFO", profile="rich")
    configure_logging("info", profile="rich")

    assert len(built) == 1
    assert logging_utils._CONFIGURED == ("rich", "INFO")
