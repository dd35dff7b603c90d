"""Shared pytest fixtures for tagchain tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture
def debug_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture tagchain DEBUG records."""
    caplog.set_level(logging.DEBUG, logger="tagchain")
    return caplog


@pytest.fixture
def sequence() -> list[int]:
    """The unsorted, duplicated sequence used by the algorithm tests."""
    return [4, 4, 1, 2, 2, 9, 9, 9, 7, 6, 6]
