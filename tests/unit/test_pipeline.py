"""
Unit tests for the transform pipeline (nwis_rdb_ingest.transforms.pipeline).

Verifies that option flags enable and disable steps and that the steps
run in order on a typed Table.
"""

from __future__ import annotations

import pandas as pd

from nwis_rdb_ingest.config import ImportOptions
from nwis_rdb_ingest.parsers.base import ColumnKind, Table
from nwis_rdb_ingest.transforms.pipeline import TransformPipeline


def _make_table() -> Table:
    """A typed table with a value column and a sample date/time pair."""
    df = pd.DataFrame(
        {
            "sample_dt": ["2012-06-05"],
            "sample_tm": ["10:30"],
            "sample_tz_cd": ["EDT"],
            "result_va": ["0.12"],
        },
        dtype=object,
    )
    return Table(df=df, kinds={c: ColumnKind.TEXT for c in df.columns})


class TestTransformPipeline:
    def test_full_run(self, convention):
        result = TransformPipeline(ImportOptions(), convention).run(_make_table())
        assert result.kinds["result_va"] is ColumnKind.NUMERIC
        assert result.kinds["startDateTime"] is ColumnKind.TIMESTAMP
        assert result.df["startDateTime"].iloc[0] == pd.Timestamp("2012-06-05 14:30", tz="UTC")

    def test_as_datetime_disabled(self, convention):
        options = ImportOptions(as_datetime=False)
        result = TransformPipeline(options, convention).run(_make_table())
        assert result.kinds["result_va"] is ColumnKind.NUMERIC
        assert result.columns == ["sample_dt", "sample_tm", "sample_tz_cd", "result_va"]

    def test_convert_type_disabled(self, convention):
        options = ImportOptions(convert_type=False)
        table = _make_table()
        result = TransformPipeline(options, convention).run(table)
        assert result is table

    def test_zero_rows_pass_through(self, convention):
        df = pd.DataFrame({"sample_dt": pd.Series(dtype=object), "tz_cd": pd.Series(dtype=object)})
        table = Table(df=df, kinds={c: ColumnKind.TEXT for c in df.columns})
        result = TransformPipeline(ImportOptions(), convention).run(table)
        assert result.columns == ["sample_dt", "tz_cd"]

    def test_default_convention(self):
        pipeline = TransformPipeline(ImportOptions())
        assert pipeline.convention.name == "rdb1"
