"""
Shared test fixtures and path constants for nwis-rdb-ingest tests.

All input file paths are defined here as module-level constants for
easy discovery and modification. If fixture documents move or new ones
are added, update this file.
"""

from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Fixture document paths -- edit here if files move or new ones are added
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent / "data"

UV_RDB = DATA_DIR / "uv_discharge.rdb"
QW_RDB = DATA_DIR / "qw_samples.rdb"
LEGACY_RDB = DATA_DIR / "legacy_datetime.rdb"
QUOTE_RDB = DATA_DIR / "quote_artifact.rdb"
HEADER_ONLY_RDB = DATA_DIR / "header_only.rdb"


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs against fixture documents)",
    )


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def convention():
    """The built-in rdb1 naming convention."""
    from nwis_rdb_ingest.convention_registry import load_conventions

    return load_conventions()
