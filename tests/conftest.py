# tests/conftest.py
from __future__ import annotations

import pytest

from detprime import runtime


@pytest.fixture(autouse=True)
def isolated_runtime(tmp_path, monkeypatch):
    """Fresh runtime settings and an empty workspace for every test."""
    monkeypatch.setenv("DETPRIME_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("DETPRIME_PROFILE", raising=False)
    runtime.reset()
    yield
    runtime.reset()
