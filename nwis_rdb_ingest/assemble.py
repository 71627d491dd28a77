"""
Result assembly for nwis-rdb-ingest.

Turns the final working ``Table`` into a ``RecordSet``:

1. Moves ``tz_cd_reported`` immediately before ``tz_cd`` so the original
   and normalized codes read side by side.
2. Normalizes column names to valid Python identifiers, so every column
   is reachable as ``df.<name>`` / a keyword argument. NWIS names such as
   ``68478_00060_00003`` become ``X68478_00060_00003``.
3. Attaches the retrieval time, the comment block and -- only for remote
   documents -- the source URL and response headers.

``empty_record_set()`` builds the diagnostics-only result returned when
the service signalled a warning.
"""

from __future__ import annotations

import keyword
import logging
import re
from datetime import datetime, timezone

import pandas as pd

from nwis_rdb_ingest.convention_registry import NamingConvention, load_conventions
from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.fetch import FetchResult
from nwis_rdb_ingest.parsers.base import Table
from nwis_rdb_ingest.record_set import RecordSet, RecordSetMetadata

logger = logging.getLogger(__name__)

_INVALID_CHARS_RE = re.compile(r"[^0-9A-Za-z_]")


def make_identifier(name: str) -> str:
    """Map a column name onto a valid Python identifier.

    Invalid characters become ``_``; a name not starting with a letter or
    underscore gets an ``X`` prefix; keywords get a trailing ``_``.
    """
    cleaned = _INVALID_CHARS_RE.sub("_", name)
    if not cleaned or not (cleaned[0].isalpha() or cleaned[0] == "_"):
        cleaned = f"X{cleaned}"
    if keyword.iskeyword(cleaned):
        cleaned = f"{cleaned}_"
    return cleaned


def normalize_column_names(names: list[str]) -> dict[str, str]:
    """Identifier for every name, de-duplicated with ``_1``, ``_2``, ..."""
    mapping: dict[str, str] = {}
    seen: set[str] = set()
    for name in names:
        base = make_identifier(name)
        candidate = base
        n = 1
        while candidate in seen:
            candidate = f"{base}_{n}"
            n += 1
        seen.add(candidate)
        mapping[name] = candidate
    return mapping


def _group_reported_tz(table: Table, convention: NamingConvention) -> None:
    tz_col = convention.shared_tz_column
    reported = convention.reported_name(tz_col)
    if reported not in table.kinds or tz_col not in table.kinds:
        return
    order = [c for c in table.columns if c != reported]
    order.insert(order.index(tz_col), reported)
    table.reorder(order)


def assemble_record_set(
    table: Table,
    comments: list[str],
    fetched: FetchResult | None = None,
    convention: NamingConvention | None = None,
) -> RecordSet:
    """Build the final RecordSet from a working table.

    Args:
        table: Output of the transform pipeline.
        comments: The document's comment lines.
        fetched: The fetch result when the document came from the web
            service; ``None`` for local or in-memory documents.
        convention: Naming convention; defaults to the built-in ``rdb1``.

    Returns:
        The RecordSet.
    """
    convention = convention or load_conventions()
    table = table.copy()
    _group_reported_tz(table, convention)

    mapping = normalize_column_names(table.columns)
    renamed = {old: new for old, new in mapping.items() if old != new}
    if renamed:
        logger.debug("Renamed columns to identifiers: %s", renamed)
        table.rename_columns(renamed)

    metadata = RecordSetMetadata(
        retrieval_time=datetime.now(timezone.utc),
        comment=tuple(comments),
        source=fetched.url if fetched is not None else None,
        header_info=dict(fetched.header_info) if fetched is not None else None,
    )
    record_set = RecordSet(
        data=table.df.reset_index(drop=True),
        kinds={c: table.kinds[c] for c in table.columns},
        metadata=metadata,
        diagnostics=tuple(table.diagnostics),
    )
    logger.info(
        "Assembled record set: %d rows x %d columns, %d diagnostic(s)",
        len(record_set),
        len(record_set.columns),
        len(record_set.diagnostics),
    )
    return record_set


def empty_record_set(fetched: FetchResult) -> RecordSet:
    """Diagnostics-only result for a fetch that carried a service warning."""
    diagnostic = Diagnostic(
        kind=DiagnosticKind.UPSTREAM_WARNING,
        message=fetched.header_info.get("warn", "Service reported a warning"),
    )
    diagnostic.log()
    return RecordSet(
        data=pd.DataFrame(),
        kinds={},
        metadata=RecordSetMetadata(
            retrieval_time=datetime.now(timezone.utc),
            source=fetched.url,
            header_info=dict(fetched.header_info),
        ),
        diagnostics=(diagnostic,),
    )
