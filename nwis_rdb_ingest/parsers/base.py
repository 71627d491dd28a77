"""
Base reader protocol / ABC and the working table for nwis-rdb-ingest.

All readers implement the same contract:
1. read() takes a ``SplitDocument`` and returns a ``Table``.
2. ``Table`` carries the DataFrame, an explicit ``ColumnKind`` per column,
   and the diagnostics recorded so far.

Why an explicit kind per column:
- pandas dtypes drift as columns are copied and reassigned (object vs.
  string, naive vs. tz-aware datetimes). Downstream stages select
  columns by their tagged kind, decided once, instead of re-inspecting
  dtypes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

import pandas as pd

from nwis_rdb_ingest.diagnostics import Diagnostic
from nwis_rdb_ingest.document import SplitDocument


class ColumnKind(str, Enum):
    """Semantic value kind of a column."""

    TEXT = "text"
    NUMERIC = "numeric"
    TIMESTAMP = "timestamp"


@dataclass
class Table:
    """Mutable working table passed between pipeline stages.

    Each transform starts from ``table.copy()`` and returns the copy, so a
    stage never mutates the table it was given.

    Attributes:
        df: Column data. Column order is the output order.
        kinds: Column name -> ColumnKind. Always has exactly the
            DataFrame's columns as keys.
        diagnostics: Recoverable conditions recorded so far.
    """

    df: pd.DataFrame
    kinds: dict[str, ColumnKind]
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def columns(self) -> list[str]:
        return list(self.df.columns)

    def copy(self) -> Table:
        return Table(
            df=self.df.copy(),
            kinds=dict(self.kinds),
            diagnostics=list(self.diagnostics),
        )

    def columns_of_kind(self, kind: ColumnKind) -> list[str]:
        """Column names tagged with *kind*, in column order."""
        return [c for c in self.df.columns if self.kinds[c] is kind]

    def set_column(self, name: str, values: pd.Series, kind: ColumnKind) -> None:
        """Add or replace a column; new columns are appended at the end."""
        self.df[name] = values
        self.kinds[name] = kind

    def drop_columns(self, names: list[str]) -> None:
        self.df = self.df.drop(columns=names)
        for name in names:
            del self.kinds[name]

    def rename_columns(self, mapping: dict[str, str]) -> None:
        self.df = self.df.rename(columns=mapping)
        self.kinds = {mapping.get(k, k): v for k, v in self.kinds.items()}

    def reorder(self, columns: list[str]) -> None:
        self.df = self.df[columns].copy()

    def record(self, diagnostic: Diagnostic) -> None:
        """Append a diagnostic and log it."""
        diagnostic.log()
        self.diagnostics.append(diagnostic)


class BaseReader(ABC):
    """Abstract base class for RDB data-line readers.

    Subclasses must implement read(). Readers never look at comment
    lines; the ``SplitDocument`` has already separated them.
    """

    @abstractmethod
    def read(self, document: SplitDocument) -> Table:
        """Parse the data lines of a split RDB document.

        Args:
            document: Output of ``split_document()``.

        Returns:
            Table with one column per header name, in header order.
        """
