"""
Pytest configuration and shared fixtures for hashtree tests.

This conftest.py:
1. Adds project root and tests root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Keeps HASHTREE_* environment variables from leaking into tests
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures import LETTERS, make_engine, make_tree, make_values  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove HASHTREE_* variables and reset the cached default config."""
    import os
    from hashtree.config import set_default_config

    for key in list(os.environ):
        if key.startswith("HASHTREE_"):
            monkeypatch.delenv(key, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def engine():
    """Provide a SHA-256 digest engine."""
    return make_engine("sha256")


@pytest.fixture
def letters():
    """Provide the values b"a".."h"."""
    return list(LETTERS)


@pytest.fixture
def letter_tree():
    """Provide a tree constructed over b"a".."h"."""
    return make_tree()


@pytest.fixture
def odd_tree():
    """Provide a tree over five values (odd tails at two levels)."""
    return make_tree(make_values(5))

