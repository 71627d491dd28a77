"""
Parsers sub-package for nwis-rdb-ingest.

Contains the readers that convert the data lines of a split RDB1 document
into a ``Table`` (DataFrame + per-column ``ColumnKind``).

Design: Strategy Pattern
- base.py defines the BaseReader ABC, ColumnKind and the working Table.
- raw.py implements RawReader: every cell kept as text, no inference.
- typed.py implements TypedReader: pandas parse with a strict/relaxed
  quoting fallback, then per-column numeric/timestamp inference.

``select_reader()`` picks the strategy from the ``convert_type`` option.
"""

from __future__ import annotations

from nwis_rdb_ingest.convention_registry import NamingConvention
from nwis_rdb_ingest.parsers.base import BaseReader


def select_reader(convert_type: bool, convention: NamingConvention) -> BaseReader:
    """Return the reader for the requested mode."""
    from nwis_rdb_ingest.parsers.raw import RawReader
    from nwis_rdb_ingest.parsers.typed import TypedReader

    if convert_type:
        return TypedReader(convention)
    return RawReader(convention.delimiter)
