"""
Internal pipeline orchestration for nwis-rdb-ingest.

Extracted from ``__init__.py`` so that ``parse_rdb1()`` (in-memory) and
``import_rdb1()`` (file / web service) share the same
split -> read -> transform -> assemble sequence.

This module is **not** part of the public API.
"""

from __future__ import annotations

import logging

from nwis_rdb_ingest.assemble import assemble_record_set
from nwis_rdb_ingest.config import ImportOptions
from nwis_rdb_ingest.convention_registry import NamingConvention, load_conventions
from nwis_rdb_ingest.document import split_document
from nwis_rdb_ingest.fetch import FetchResult
from nwis_rdb_ingest.parsers import select_reader
from nwis_rdb_ingest.record_set import RecordSet
from nwis_rdb_ingest.transforms.pipeline import TransformPipeline

logger = logging.getLogger(__name__)


def run_import(
    lines: list[str],
    options: ImportOptions,
    fetched: FetchResult | None = None,
    convention: NamingConvention | None = None,
) -> RecordSet:
    """Parse document lines into a RecordSet.

    Steps:
      1. Split into comments, column specs and data lines.
      2. Read the data lines (raw or typed, per ``convert_type``).
      3. Run the transform pipeline (numbers -> date/times -> timezones).
      4. Assemble the RecordSet with metadata and diagnostics.

    Args:
        lines: The document's lines.
        options: Validated import options.
        fetched: The fetch result for remote documents, else ``None``.
        convention: Naming convention; defaults to the built-in ``rdb1``.

    Returns:
        The assembled RecordSet.

    Raises:
        MalformedHeaderError: If the header lines are unusable.
    """
    convention = convention or load_conventions()

    document = split_document(lines, convention.comment_marker, convention.delimiter)
    reader = select_reader(options.convert_type, convention)
    table = reader.read(document)
    table = TransformPipeline(options, convention).run(table)

    return assemble_record_set(table, document.comments, fetched, convention)
