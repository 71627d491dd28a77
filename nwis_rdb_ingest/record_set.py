"""
Result types for nwis-rdb-ingest.

``RecordSet`` is what every public entry point returns: the typed table,
an explicit kind per column, named metadata fields and the diagnostics
recorded while parsing. It is built once by ``assemble.py`` and not
modified afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

import pandas as pd

from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.parsers.base import ColumnKind


@dataclass(frozen=True)
class RecordSetMetadata:
    """Result-level metadata.

    Attributes:
        retrieval_time: When the result was assembled (UTC).
        comment: The document's comment block, verbatim.
        source: The URL the document was fetched from; ``None`` for local
            files and in-memory documents.
        header_info: Response headers from the fetch; ``None`` unless the
            document was fetched.
    """

    retrieval_time: datetime
    comment: tuple[str, ...] = ()
    source: str | None = None
    header_info: Mapping[str, str] | None = None


@dataclass(frozen=True, eq=False)
class RecordSet:
    """A parsed RDB1 document.

    Attributes:
        data: One column per output field; column order is meaningful.
        kinds: Column name -> ColumnKind for every column of ``data``.
        metadata: See ``RecordSetMetadata``.
        diagnostics: Recoverable conditions met while parsing.
    """

    data: pd.DataFrame
    kinds: Mapping[str, ColumnKind]
    metadata: RecordSetMetadata
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def columns(self) -> list[str]:
        return list(self.data.columns)

    @property
    def is_empty(self) -> bool:
        return self.data.empty

    def columns_of_kind(self, kind: ColumnKind) -> list[str]:
        return [c for c in self.data.columns if self.kinds[c] is kind]

    def diagnostics_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]
