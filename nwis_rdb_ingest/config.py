"""
Configuration models and YAML I/O for nwis-rdb-ingest.

This module defines the Pydantic models for import options and the
optional YAML run file used by ``scripts/run_import.py``, plus helpers to
load and save that file.

Key models:
- ImportOptions: Parse toggles and the output timezone.
- OutputConfig: Output directory, format and table name for exports.
- ImportConfig: Top-level run file (source + options + output).

Key functions:
- load_config(path) -> ImportConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

Why Pydantic + YAML:
- Pydantic validates the timezone name once, at the edge, so the
  pipeline never sees an invalid zone.
- YAML run files are human-editable and reproducible.
"""

from __future__ import annotations

import logging
import zoneinfo
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from nwis_rdb_ingest.exceptions import RdbIngestError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _known_timezones() -> frozenset[str]:
    return frozenset(zoneinfo.available_timezones()) | {"UTC"}


class ImportOptions(BaseModel):
    """Options controlling how an RDB1 document is converted."""

    as_datetime: bool = Field(
        True, description="If True, merge date/time pairs into timestamps"
    )
    convert_type: bool = Field(
        True,
        description="If True, infer numeric/timestamp columns; if False, all text",
    )
    tz: str = Field(
        "UTC",
        description=(
            "Output timezone for timestamps, e.g. 'America/New_York'. "
            "An empty string means UTC."
        ),
    )

    @field_validator("tz")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        """Normalize '' to UTC and reject names unknown to the tz database."""
        if value == "":
            return "UTC"
        if value not in _known_timezones():
            raise ValueError(
                f"Unknown timezone '{value}'. Use an IANA name such as "
                "'UTC', 'America/New_York' or 'America/Chicago'."
            )
        return value


class OutputConfig(BaseModel):
    """Output settings."""

    output_dir: str = Field("outputs/", description="Directory for output files")
    output_format: Literal["csv", "parquet"] = Field(
        "parquet", description="Output format"
    )
    table_name: str = Field("data", description="File stem of the exported table")


class ImportConfig(BaseModel):
    """Top-level run file for ``scripts/run_import.py``."""

    source: str = Field(..., description="Local RDB file path or service URL")
    options: ImportOptions = Field(default_factory=ImportOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: str | Path) -> ImportConfig:
    """Load and validate a YAML run file into an ImportConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        RdbIngestError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise RdbIngestError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return ImportConfig.model_validate(raw)


def save_config(config: ImportConfig, path: str | Path) -> None:
    """Serialize an ImportConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# nwis-rdb-ingest run configuration\n\n")
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    logger.info("Saved config to %s", path)
