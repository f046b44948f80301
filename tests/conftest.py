import os

import pytest


@pytest.fixture(autouse=True)
def _clean_protoclass_env(monkeypatch):
    """Keep tests independent of any PROTOCLASS_* settings in the caller's shell."""
    for key in list(os.environ):
        if key.startswith("PROTOCLASS_"):
            monkeypatch.delenv(key, raising=False)
    yield
