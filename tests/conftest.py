import os

import pytest


@pytest.fixture(autouse=True)
def _clean_convflow_env(monkeypatch):
    """Ensure tests never pick up CF_* settings from the developer's shell."""
    for name in list(os.environ):
        if name.startswith("CF_"):
            monkeypatch.delenv(name, raising=False)
    yield
