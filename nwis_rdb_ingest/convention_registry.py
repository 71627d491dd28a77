"""
Naming-convention loader for nwis-rdb-ingest.

Loads convention YAML files from nwis_rdb_ingest/conventions/ and provides
structured access via Pydantic models. A convention declares:
- comment_marker / delimiter: how the document is split
- value_suffix: which columns the numeric coercer targets
- pair: date/time pair suffixes, per-pair timezone suffixes, parse formats
- shared_tz_column: the unqualified timezone-code column
- sample: the water-quality start/end special case
- legacy: the DATE/TIME/TZCD layout
- renames: output columns renamed for downstream consistency

Why YAML instead of inline string matching:
- The convention is a versionable data structure that tests can read.
- Column names the service changes can be edited without touching the
  reconstruction logic.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Directory containing convention YAML files (sibling package)
_CONVENTIONS_DIR = Path(__file__).parent / "conventions"

_DEFAULT_CONVENTION = "rdb1"


class PairConvention(BaseModel):
    """Split date/time columns that share a base name."""
    date_suffix: str = "_dt"
    time_suffix: str = "_tm"
    output_suffix: str = "_dateTime"
    tz_suffixes: list[str] = Field(default_factory=lambda: ["_tz_cd", "_time_datum_cd"])
    datetime_formats: list[str] = Field(
        default_factory=lambda: ["%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M"]
    )

    def base_of(self, column: str) -> str | None:
        """Base name of a ``_dt`` / ``_tm`` column, else ``None``."""
        for suffix in (self.date_suffix, self.time_suffix):
            if column.endswith(suffix) and len(column) > len(suffix):
                return column[: -len(suffix)]
        return None


class SampleConvention(BaseModel):
    """Start/end sample pairs sharing one timezone datum column."""
    start_base: str
    end_base: str
    datum_column: str
    end_datum_column: str


class LegacyConvention(BaseModel):
    """The DATE + TIME + TZCD layout of older service outputs."""
    date_column: str
    time_column: str
    tz_column: str
    output_column: str
    date_formats: list[str]
    datetime_format: str


class NamingConvention(BaseModel):
    """A complete naming convention loaded from YAML."""
    name: str
    comment_marker: str = "#"
    delimiter: str = "\t"
    value_suffix: str = "_va"
    reported_suffix: str = "_reported"
    pair: PairConvention = Field(default_factory=PairConvention)
    shared_tz_column: str = "tz_cd"
    sample: SampleConvention | None = None
    legacy: LegacyConvention | None = None
    renames: dict[str, str] = Field(default_factory=dict)

    def reported_name(self, column: str) -> str:
        return f"{column}{self.reported_suffix}"


def load_convention(path: Path) -> NamingConvention:
    """Load a single convention YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    return NamingConvention.model_validate(raw)


@lru_cache(maxsize=None)
def load_conventions(name: str = _DEFAULT_CONVENTION) -> NamingConvention:
    """Load a named convention from the built-in conventions/ directory.

    The result is cached and shared across calls; treat it as read-only.

    Raises:
        FileNotFoundError: If no ``<name>.yaml`` exists.
    """
    path = _CONVENTIONS_DIR / f"{name}.yaml"
    if not path.exists():
        available = sorted(p.stem for p in _CONVENTIONS_DIR.glob("*.yaml"))
        raise FileNotFoundError(
            f"Naming convention '{name}' not found. Available: {available}"
        )
    convention = load_convention(path)
    logger.debug("Loaded naming convention '%s' from %s", convention.name, path)
    return convention
