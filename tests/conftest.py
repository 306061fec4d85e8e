from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger

from bashtestmd import logging_utils


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(logging_utils, "_CONFIGURED", None)
    yield
    # CLI runs bind loguru to the runner's temporary stderr.
    logger.remove()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("BASHTESTMD_WAIT_TIMEOUT", "BASHTESTMD_POLL_INTERVAL", "BASHTESTMD_LOG_LEVEL", "BASHTESTMD_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
