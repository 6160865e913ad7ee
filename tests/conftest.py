from __future__ import annotations

import pytest

from requestx import config


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.current = start

    def time(self) -> float:
        return self.current

    def advance(self, value: float) -> None:
        self.current += value


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    monkeypatch.delenv(config.STRICT_ENV, raising=False)
    monkeypatch.delenv(config.DEFAULT_TIMEOUT_ENV, raising=False)
    monkeypatch.delenv(config.LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv(config.ENV_FILE_ENV, raising=False)
    yield


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
