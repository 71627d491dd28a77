"""
nwis-rdb-ingest: Python library for reading USGS NWIS RDB 1.0 documents.

Public API surface:

- ``import_rdb1(obs_url, ...)`` -- **recommended entry point**. Accepts a
  local file path (plain or ``.gz``) or a web-service URL and returns a
  ``RecordSet``.

- ``parse_rdb1(document, ...)`` -- Parse a document that is already in
  memory (text, bytes or lines). Performs no I/O.

- ``export_record_set(record_set, ...)`` -- Write a RecordSet (plus its
  ``_meta`` table and comment block) to CSV or Parquet.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from nwis_rdb_ingest._pipeline import run_import
from nwis_rdb_ingest.assemble import empty_record_set
from nwis_rdb_ingest.config import ImportOptions
from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.document import read_lines
from nwis_rdb_ingest.export import export_record_set
from nwis_rdb_ingest.fetch import Fetcher, FetchResult, WebServiceFetcher
from nwis_rdb_ingest.parsers.base import ColumnKind
from nwis_rdb_ingest.record_set import RecordSet, RecordSetMetadata

__all__ = [
    "import_rdb1",
    "parse_rdb1",
    "export_record_set",
    "ImportOptions",
    "RecordSet",
    "RecordSetMetadata",
    "ColumnKind",
    "Diagnostic",
    "DiagnosticKind",
    "Fetcher",
    "FetchResult",
    "WebServiceFetcher",
]

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def parse_rdb1(
    document: str | bytes | list[str],
    *,
    as_datetime: bool = True,
    convert_type: bool = True,
    tz: str = "UTC",
) -> RecordSet:
    """Parse an in-memory RDB1 document.

    Args:
        document: The document text, raw bytes, or a list of lines.
        as_datetime: If ``True``, merge date/time column pairs into
            timestamps and normalize them to *tz*.
        convert_type: If ``True``, infer numeric and timestamp columns and
            coerce value (``_va``) columns. If ``False``, every column is
            returned as text and *as_datetime* has no effect.
        tz: Output timezone (IANA name). ``""`` means UTC.

    Returns:
        A ``RecordSet`` without ``source`` / ``header_info`` metadata.

    Raises:
        MalformedHeaderError: If the header lines are unusable.
        pydantic.ValidationError: If *tz* is not a known timezone.
    """
    options = ImportOptions(as_datetime=as_datetime, convert_type=convert_type, tz=tz)
    return run_import(read_lines(document), options)


def import_rdb1(
    obs_url: str | Path,
    as_datetime: bool = True,
    convert_type: bool = True,
    tz: str = "UTC",
    fetcher: Fetcher | None = None,
) -> RecordSet:
    """Read an RDB1 document from a local file or the NWIS web services.

    A path to an existing file is read directly. Anything starting with
    ``http://`` or ``https://`` is retrieved through *fetcher*. If the
    service signals a warning (e.g. no data for the query), an empty
    RecordSet carrying only the diagnostic and header info is returned
    and no parsing happens.

    Args:
        obs_url: Local file path or service URL.
        as_datetime: See ``parse_rdb1()``.
        convert_type: See ``parse_rdb1()``.
        tz: See ``parse_rdb1()``.
        fetcher: Retrieval collaborator; defaults to ``WebServiceFetcher()``.

    Returns:
        The parsed ``RecordSet``. For fetched documents, ``metadata.source``
        and ``metadata.header_info`` are populated.

    Raises:
        FileNotFoundError: If *obs_url* is neither a URL nor an existing file.
        FetchError: If the web service cannot be reached.
        MalformedHeaderError: If the header lines are unusable.
        pydantic.ValidationError: If *tz* is not a known timezone.

    Examples::

        # Local file
        rs = nwis_rdb_ingest.import_rdb1("RDB1Example.txt")

        # Instantaneous values, timestamps in US Central time
        rs = nwis_rdb_ingest.import_rdb1(
            "https://waterservices.usgs.gov/nwis/iv/?sites=02177000"
            "&parameterCd=00060&startDT=2020-10-30&endDT=2020-11-01&format=rdb",
            tz="America/Chicago",
        )
        df = rs.data
    """
    options = ImportOptions(as_datetime=as_datetime, convert_type=convert_type, tz=tz)
    location = str(obs_url)

    if not _URL_RE.match(location):
        path = Path(location)
        if not path.is_file():
            raise FileNotFoundError(f"RDB file not found: {path}")
        logger.info("import_rdb1() -- reading local file %s", path)
        return run_import(read_lines(path), options)

    fetched = (fetcher or WebServiceFetcher()).fetch(location)
    if fetched.warned:
        return empty_record_set(fetched)
    return run_import(read_lines(fetched.text), options, fetched=fetched)
