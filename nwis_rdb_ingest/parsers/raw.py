"""
Raw-string reader for RDB1 data lines.

Splits each data line on the delimiter and keeps every cell as text.
Nothing is inferred, unquoted or trimmed, so joining a row's cells with
the delimiter gives back the original line (short rows are padded with
empty cells, which only adds trailing delimiters).
"""

from __future__ import annotations

import logging

import pandas as pd

from nwis_rdb_ingest.document import SplitDocument
from nwis_rdb_ingest.parsers.base import BaseReader, ColumnKind, Table

logger = logging.getLogger(__name__)


def split_cells(lines: list[str], n_columns: int, delimiter: str = "\t") -> list[list[str]]:
    """Split lines into exactly *n_columns* cells each.

    Short rows are padded with ``""``. Surplus cells are folded back into
    the last column so no text is lost.
    """
    rows: list[list[str]] = []
    for line in lines:
        cells = line.split(delimiter)
        if len(cells) < n_columns:
            cells.extend([""] * (n_columns - len(cells)))
        elif len(cells) > n_columns:
            cells = cells[: n_columns - 1] + [delimiter.join(cells[n_columns - 1:])]
        rows.append(cells)
    return rows


class RawReader(BaseReader):
    """Reader that returns every column as ``ColumnKind.TEXT``."""

    def __init__(self, delimiter: str = "\t") -> None:
        self.delimiter = delimiter

    def read(self, document: SplitDocument) -> Table:
        names = document.names
        rows = split_cells(document.data_lines, len(names), self.delimiter)
        df = pd.DataFrame(rows, columns=names, dtype=object)
        logger.info("Raw read: %d rows x %d columns", len(df), len(names))
        return Table(df=df, kinds={name: ColumnKind.TEXT for name in names})
