"""Pytest configuration for test isolation.

The CLI loads ``.env`` from the current working directory and reads
``PAYMENT_PROCESSOR_LOG_LEVEL`` from the environment. To keep tests hermetic we
run each test from its own temporary directory with that variable unset.
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so the original (unset) state is restored even when a test
    # loads the variable from .env.
    monkeypatch.setenv("PAYMENT_PROCESSOR_LOG_LEVEL", "")
    monkeypatch.delenv("PAYMENT_PROCESSOR_LOG_LEVEL")
    monkeypatch.chdir(tmp_path)
