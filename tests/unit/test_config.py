"""
Unit tests for config models and YAML I/O (nwis_rdb_ingest.config).

Tests Pydantic model validation (timezone names in particular) and the
YAML save/load round-trip of run files.
"""

import pytest
from pydantic import ValidationError

from nwis_rdb_ingest.config import (
    ImportConfig,
    ImportOptions,
    OutputConfig,
    load_config,
    save_config,
)
from nwis_rdb_ingest.exceptions import RdbIngestError


# ---------------------------------------------------------------------------
# ImportOptions
# ---------------------------------------------------------------------------

class TestImportOptions:
    """Tests for ImportOptions validation."""

    def test_defaults(self):
        opts = ImportOptions()
        assert opts.as_datetime is True
        assert opts.convert_type is True
        assert opts.tz == "UTC"

    def test_empty_tz_means_utc(self):
        assert ImportOptions(tz="").tz == "UTC"

    @pytest.mark.parametrize(
        "tz", ["America/New_York", "America/Chicago", "America/Denver",
               "America/Los_Angeles", "America/Anchorage", "Pacific/Honolulu"],
    )
    def test_us_zones_accepted(self, tz):
        assert ImportOptions(tz=tz).tz == tz

    def test_unknown_tz_rejected(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            ImportOptions(tz="Mars/Olympus_Mons")

    def test_abbreviation_rejected(self):
        """Reported codes like 'XST' are not output timezones."""
        with pytest.raises(ValidationError):
            ImportOptions(tz="XST")


# ---------------------------------------------------------------------------
# OutputConfig / ImportConfig
# ---------------------------------------------------------------------------

class TestOutputConfig:
    def test_defaults(self):
        cfg = OutputConfig()
        assert cfg.output_format == "parquet"
        assert cfg.table_name == "data"

    def test_invalid_format(self):
        with pytest.raises(ValidationError):
            OutputConfig(output_format="xlsx")


class TestImportConfig:
    def test_missing_source(self):
        with pytest.raises(ValidationError, match="source"):
            ImportConfig()

    def test_nested_defaults(self):
        cfg = ImportConfig(source="site.rdb")
        assert cfg.options.tz == "UTC"
        assert cfg.output.output_dir == "outputs/"


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------

class TestYamlIO:
    """Tests for save_config() / load_config()."""

    def test_round_trip(self, tmp_path):
        cfg = ImportConfig(
            source="https://waterservices.usgs.gov/nwis/iv/?sites=02177000&format=rdb",
            options=ImportOptions(tz="America/Chicago", as_datetime=False),
            output=OutputConfig(output_format="csv", table_name="uv"),
        )
        path = tmp_path / "nested" / "run.yaml"
        save_config(cfg, path)

        assert path.read_text(encoding="utf-8").startswith("# nwis-rdb-ingest")
        assert load_config(path) == cfg

    def test_partial_file_gets_defaults(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("source: site.rdb\noptions:\n  tz: America/Denver\n", encoding="utf-8")
        cfg = load_config(path)
        assert cfg.options.tz == "America/Denver"
        assert cfg.options.convert_type is True
        assert cfg.output.output_format == "parquet"

    def test_invalid_tz_in_file(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("source: site.rdb\noptions:\n  tz: Nowhere/Land\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(RdbIngestError, match="empty"):
            load_config(path)
