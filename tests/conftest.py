"""Shared fixtures for the cotask test-suite."""

from __future__ import annotations

import pytest

from cotask import Handler
from tests.helpers import RecordingHandler


@pytest.fixture
def log_lines() -> list[str]:
    return []


@pytest.fixture
def recording_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def quiet_handler(log_lines: list[str]) -> Handler:
    """Default-policy handler whose log lines land in ``log_lines``."""

    return Handler(logger=log_lines.append)
