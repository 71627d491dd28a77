"""
Unit tests for the exporter (nwis_rdb_ingest.export).

Builds small RecordSets in memory and writes them to tmp_path.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pandas as pd
import pytest

from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.exceptions import ExportError
from nwis_rdb_ingest.export import build_meta_table, export_record_set
from nwis_rdb_ingest.parsers.base import ColumnKind
from nwis_rdb_ingest.record_set import RecordSet, RecordSetMetadata


def _make_record_set() -> RecordSet:
    data = pd.DataFrame(
        {
            "site_no": ["02177000", "02177000"],
            "datetime": pd.to_datetime(["2020-11-01 03:45", "2020-11-01 05:00"]).tz_localize("UTC"),
            "result_va": ["1.2", "<1.0"],
        }
    )
    return RecordSet(
        data=data,
        kinds={
            "site_no": ColumnKind.TEXT,
            "datetime": ColumnKind.TIMESTAMP,
            "result_va": ColumnKind.TEXT,
        },
        metadata=RecordSetMetadata(
            retrieval_time=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            comment=("# U.S. Geological Survey", "#"),
            source="https://example.test/nwis",
        ),
        diagnostics=(
            Diagnostic(
                kind=DiagnosticKind.NUMERIC_COERCION_FAILURE,
                column="result_va",
                message="kept as text",
            ),
        ),
    )


class TestBuildMetaTable:
    def test_one_row_per_column(self):
        meta = build_meta_table(_make_record_set(), "uv")
        assert meta["column"].tolist() == ["site_no", "datetime", "result_va"]
        assert meta["value_kind"].tolist() == ["text", "timestamp", "text"]
        assert set(meta["table_name"]) == {"uv"}
        assert set(meta["row_count"]) == {2}
        assert set(meta["retrieval_time"]) == {"2024-05-01T12:00:00+00:00"}

    def test_column_diagnostics(self):
        meta = build_meta_table(_make_record_set(), "uv").set_index("column")
        assert meta.loc["result_va", "diagnostics"] == "kept as text"
        assert meta.loc["site_no", "diagnostics"] == ""


class TestExportRecordSet:
    def test_parquet(self, tmp_path):
        written = export_record_set(_make_record_set(), tmp_path, table_name="uv")
        assert written == [
            str(tmp_path / "uv.parquet"),
            str(tmp_path / "_meta.parquet"),
            str(tmp_path / "uv_comment.txt"),
        ]

        df = pd.read_parquet(tmp_path / "uv.parquet")
        assert df["site_no"].tolist() == ["02177000", "02177000"]
        assert df["datetime"].iloc[0] == pd.Timestamp("2020-11-01 03:45", tz="UTC")

    def test_csv(self, tmp_path):
        export_record_set(_make_record_set(), tmp_path, output_format="csv")
        df = pd.read_csv(tmp_path / "data.csv", dtype=str)
        assert df["result_va"].tolist() == ["1.2", "<1.0"]
        assert (tmp_path / "_meta.csv").exists()

    def test_comment_file(self, tmp_path):
        export_record_set(_make_record_set(), tmp_path)
        text = (tmp_path / "data_comment.txt").read_text(encoding="utf-8")
        assert text == "# U.S. Geological Survey\n#\n"

    def test_creates_output_dir(self, tmp_path):
        out = tmp_path / "a" / "b"
        export_record_set(_make_record_set(), out)
        assert (out / "data.parquet").exists()

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ExportError, match="Unsupported"):
            export_record_set(_make_record_set(), tmp_path, output_format="xlsx")
