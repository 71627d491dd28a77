"""
Numeric coercion transform for nwis-rdb-ingest.

Measurement columns are marked by the value suffix (``_va``). Their cells
are usually plain numbers, but water-quality results may carry censoring
or qualification markers such as ``"<1.0"`` or ``"E0.5"``.

This transform:
1. Strips whitespace from every cell of each value column.
2. Treats empty cells as missing.
3. Converts the column to numeric only if **every** non-empty cell parses.

Partial conversion is never done: coercing ``"<1.0"`` to ``NaN`` would
silently destroy the qualification marker. A column that cannot be fully
converted stays text and a diagnostic is recorded.
"""

from __future__ import annotations

import logging

import pandas as pd

from nwis_rdb_ingest.convention_registry import NamingConvention
from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.parsers.base import ColumnKind, Table

logger = logging.getLogger(__name__)


def to_numeric_strict(values: pd.Series) -> pd.Series | None:
    """Convert a column of strings to numbers, all-or-nothing.

    Args:
        values: String cells; empty or whitespace-only cells become ``NaN``.

    Returns:
        The numeric Series, or ``None`` if any non-empty cell is not a number.
    """
    stripped = values.astype(str).str.strip()
    try:
        return pd.to_numeric(stripped.mask(stripped == ""), errors="raise")
    except (ValueError, TypeError):
        return None


def coerce_value_columns(table: Table, convention: NamingConvention) -> Table:
    """Convert value-suffixed text columns to numeric where fully possible.

    Args:
        table: Working table from a reader.
        convention: Supplies the value suffix.

    Returns:
        A new Table. Converted columns are tagged ``NUMERIC``; columns with
        any non-numeric cell keep their text and add a
        ``NUMERIC_COERCION_FAILURE`` diagnostic.
    """
    table = table.copy()
    value_cols = [
        c for c in table.columns
        if c.endswith(convention.value_suffix) and table.kinds[c] is ColumnKind.TEXT
    ]
    logger.debug("Value columns to coerce: %s", value_cols)

    for col in value_cols:
        numeric = to_numeric_strict(table.df[col])
        if numeric is None:
            table.record(
                Diagnostic(
                    kind=DiagnosticKind.NUMERIC_COERCION_FAILURE,
                    column=col,
                    message=(
                        f"Column {col} contains characters that cannot be "
                        "automatically converted to numeric; kept as text."
                    ),
                )
            )
            continue
        table.set_column(col, numeric, ColumnKind.NUMERIC)

    return table
