"""
Pytest configuration and shared fixtures for ledgerproof tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_ledger = importlib.import_module("fixtures.ledger_fixtures")

make_ledger = _ledger.make_ledger
make_vehicle = _ledger.make_vehicle
make_revision_metadata = _ledger.make_revision_metadata
seeded_rng = _ledger.seeded_rng


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def ledger():
    """Provide an InMemoryLedger with five committed registrations."""
    return make_ledger()


@pytest.fixture
def revision_metadata(ledger):
    """Provide a captured RevisionMetadata bundle for the first VIN."""
    return make_revision_metadata(ledger)


@pytest.fixture
def rng():
    """Provide a seeded random source."""
    return seeded_rng()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep tests independent of LEDGERPROOF_* variables and config files in cwd."""
    import os
    for key in list(os.environ):
        if key.startswith("LEDGERPROOF_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
