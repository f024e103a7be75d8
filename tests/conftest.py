import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import logging_utils  # noqa: E402
from delve.dungeon import Dungeon  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep a developer's DELVE_* environment (or .env) out of test runs."""
    for key in list(os.environ):
        if key.startswith("DELVE_"):
            monkeypatch.delenv(key, raising=False)
    level = logging_utils.CURRENT_LEVEL
    yield
    logging_utils.CURRENT_LEVEL = level


@pytest.fixture(scope="session")
def dungeon_12345():
    """Default-size level for seed 12345, generated once per session (read-only)."""
    d = Dungeon(width=50, height=50)
    d.generate(12345)
    return d


@pytest.fixture()
def fresh_dungeon():
    def _make(seed: int = 12345, **kw) -> Dungeon:
        d = Dungeon(**kw)
        d.generate(seed)
        return d

    return _make
