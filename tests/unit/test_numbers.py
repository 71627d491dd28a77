"""
Unit tests for numeric coercion (nwis_rdb_ingest.transforms.numbers).

Tests all-or-nothing conversion of value columns, whitespace handling,
and the diagnostic recorded for censored values such as "<1.0".
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from nwis_rdb_ingest.diagnostics import DiagnosticKind
from nwis_rdb_ingest.parsers.base import ColumnKind, Table
from nwis_rdb_ingest.transforms.numbers import coerce_value_columns, to_numeric_strict


def _text_table(data: dict[str, list[str]]) -> Table:
    """Helper: build a Table with all-text columns."""
    df = pd.DataFrame(data, dtype=object)
    return Table(df=df, kinds={c: ColumnKind.TEXT for c in df.columns})


class TestToNumericStrict:
    """Tests for to_numeric_strict()."""

    def test_integers(self):
        result = to_numeric_strict(pd.Series(["1", "22", "333"]))
        assert result.tolist() == [1, 22, 333]

    def test_whitespace_and_empty(self):
        result = to_numeric_strict(pd.Series([" 1.5 ", "", "   ", "2"]))
        assert result.iloc[0] == 1.5
        assert np.isnan(result.iloc[1])
        assert np.isnan(result.iloc[2])
        assert result.iloc[3] == 2

    def test_scientific_and_signs(self):
        result = to_numeric_strict(pd.Series(["1e3", "-2.5", "+4"]))
        assert result.tolist() == [1000.0, -2.5, 4.0]

    def test_any_non_numeric_cell_rejects_column(self):
        assert to_numeric_strict(pd.Series(["1.2", "<1.0"])) is None
        assert to_numeric_strict(pd.Series(["E0.5"])) is None


class TestCoerceValueColumns:
    """Tests for coerce_value_columns()."""

    def test_value_column_converted(self, convention):
        table = _text_table({"result_va": ["1.2", "3.4"], "remark_cd": ["", ""]})
        result = coerce_value_columns(table, convention)
        assert result.kinds["result_va"] is ColumnKind.NUMERIC
        assert result.df["result_va"].tolist() == [1.2, 3.4]
        assert result.diagnostics == []

    def test_non_value_columns_untouched(self, convention):
        table = _text_table({"parm_cd": ["00665", "00060"]})
        result = coerce_value_columns(table, convention)
        assert result.kinds["parm_cd"] is ColumnKind.TEXT
        assert result.df["parm_cd"].tolist() == ["00665", "00060"]

    def test_censored_value_keeps_text(self, convention):
        table = _text_table({"result_va": ["1.2", "<1.0"]})
        result = coerce_value_columns(table, convention)

        assert result.kinds["result_va"] is ColumnKind.TEXT
        assert result.df["result_va"].tolist() == ["1.2", "<1.0"]

        diags = result.diagnostics
        assert len(diags) == 1
        assert diags[0].kind is DiagnosticKind.NUMERIC_COERCION_FAILURE
        assert diags[0].column == "result_va"
        assert "result_va" in diags[0].message

    def test_empty_cells_become_missing(self, convention):
        table = _text_table({"result_va": ["", "0.05"]})
        result = coerce_value_columns(table, convention)
        assert np.isnan(result.df["result_va"].iloc[0])
        assert result.df["result_va"].iloc[1] == 0.05

    def test_input_table_not_mutated(self, convention):
        table = _text_table({"result_va": ["1", "2"]})
        coerce_value_columns(table, convention)
        assert table.kinds["result_va"] is ColumnKind.TEXT
        assert table.df["result_va"].tolist() == ["1", "2"]

    def test_already_numeric_column_skipped(self, convention):
        df = pd.DataFrame({"x_va": [1.0, 2.0]})
        table = Table(df=df, kinds={"x_va": ColumnKind.NUMERIC})
        result = coerce_value_columns(table, convention)
        assert result.kinds["x_va"] is ColumnKind.NUMERIC
        assert result.diagnostics == []

    def test_one_censored_cell_blocks_whole_column(self, convention):
        table = _text_table({"result_va": ["1.2", "3.4", "<1.0"]})
        result = coerce_value_columns(table, convention)
        assert result.df["result_va"].tolist() == ["1.2", "3.4", "<1.0"]
        assert [d.kind for d in result.diagnostics] == [
            DiagnosticKind.NUMERIC_COERCION_FAILURE
        ]
