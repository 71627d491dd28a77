"""
Typed reader for RDB1 data lines.

Parses the data lines with pandas and tags each column with the kind that
inference can confidently assign.

Two-attempt parse:
  1. Strict: standard quote handling. A cell that *starts* with a stray
     ``"`` (common in free-text remarks) swallows delimiters and line
     breaks up to the next quote, merging rows.
  2. Relaxed: quote interpretation disabled. Only tried when attempt 1
     returned fewer rows than the document has data lines.

Acceptance rule: attempt 1 if its row count matches; otherwise attempt 2
if its row count matches. When pandas rejects attempt 2 or it is still
short (blank data lines), the lines are split on the delimiter directly,
which always yields one row per data line.

Inference (over every row, guided by the header type token):
- ``s`` columns stay text.
- ``NUMERIC`` when every non-empty cell is a number. Without an ``n``
  token, integers with a leading zero (site numbers, codes) stay text.
- ``TIMESTAMP`` when every non-empty cell is ``YYYY-MM-DD HH:MM[:SS]``.
- Columns without any non-empty cell stay text.
"""

from __future__ import annotations

import csv
import io
import logging

import pandas as pd

from nwis_rdb_ingest.convention_registry import NamingConvention
from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.document import ColumnSpec, SplitDocument
from nwis_rdb_ingest.parsers.base import BaseReader, ColumnKind, Table
from nwis_rdb_ingest.parsers.raw import split_cells
from nwis_rdb_ingest.transforms.datetimes import parse_with_formats
from nwis_rdb_ingest.transforms.numbers import to_numeric_strict

logger = logging.getLogger(__name__)

_DATETIME_PATTERN = r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}(:\d{2})?$"
_LEADING_ZERO_PATTERN = r"^[+-]?0\d"


class TypedReader(BaseReader):
    """Reader with quote-fallback parsing and per-column type inference."""

    def __init__(self, convention: NamingConvention) -> None:
        self.convention = convention

    def read(self, document: SplitDocument) -> Table:
        names = document.names
        expected = document.expected_rows
        if expected == 0:
            df = pd.DataFrame({name: pd.Series(dtype=object) for name in names})
            return Table(df=df, kinds={name: ColumnKind.TEXT for name in names})

        text = "\n".join(document.data_lines)
        diagnostics: list[Diagnostic] = []

        cells = self._read_attempt(text, names, csv.QUOTE_MINIMAL)
        strict_rows = 0 if cells is None else len(cells)
        if strict_rows != expected:
            relaxed = self._read_attempt(text, names, csv.QUOTE_NONE)
            relaxed_rows = 0 if relaxed is None else len(relaxed)
            message = (
                f"Strict parse returned {strict_rows} of {expected} rows; "
                f"relaxed quoting returned {relaxed_rows}."
            )
            if relaxed_rows != expected:
                logger.debug("Relaxed parse short, splitting lines directly")
                relaxed = pd.DataFrame(
                    split_cells(document.data_lines, len(names), self.convention.delimiter),
                    columns=names,
                    dtype=object,
                )
                message += " Lines were split on the delimiter directly."
            diagnostics.append(
                Diagnostic(kind=DiagnosticKind.ROW_COUNT_MISMATCH, message=message)
            )
            cells = relaxed

        table = Table(df=pd.DataFrame(index=cells.index), kinds={})
        for diagnostic in diagnostics:
            table.record(diagnostic)
        for spec in document.columns:
            kind, values = self._infer(cells[spec.name], spec)
            table.set_column(spec.name, values, kind)

        logger.info(
            "Typed read: %d rows x %d columns (%d numeric, %d timestamp)",
            len(table.df),
            len(names),
            len(table.columns_of_kind(ColumnKind.NUMERIC)),
            len(table.columns_of_kind(ColumnKind.TIMESTAMP)),
        )
        return table

    def _read_attempt(
        self, text: str, names: list[str], quoting: int
    ) -> pd.DataFrame | None:
        """One pandas parse of the data text, every cell as a string."""
        try:
            df = pd.read_csv(
                io.StringIO(text),
                sep=self.convention.delimiter,
                header=None,
                names=names,
                index_col=False,
                dtype=str,
                na_filter=False,
                skip_blank_lines=False,
                quoting=quoting,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            logger.debug("Parse attempt (quoting=%d) failed: %s", quoting, exc)
            return None
        return df.fillna("")

    def _infer(self, values: pd.Series, spec: ColumnSpec) -> tuple[ColumnKind, pd.Series]:
        letter = spec.type_letter
        stripped = values.astype(str).str.strip()
        present = stripped[stripped != ""]
        if present.empty or letter == "s":
            return ColumnKind.TEXT, values

        if letter in (None, "n"):
            leading_zero = letter is None and present.str.match(_LEADING_ZERO_PATTERN).any()
            if not leading_zero:
                numeric = to_numeric_strict(values)
                if numeric is not None:
                    return ColumnKind.NUMERIC, numeric

        if letter in (None, "d") and present.str.match(_DATETIME_PATTERN).all():
            parsed = parse_with_formats(values, self.convention.pair.datetime_formats)
            if parsed[present.index].notna().all():
                return ColumnKind.TIMESTAMP, parsed

        return ColumnKind.TEXT, values
