"""
Custom exception hierarchy for nwis-rdb-ingest.

Only structural problems are raised. Conditions the parser can recover
from (short strict parse, non-numeric value columns, unparseable date/time
pairs, unknown timezone codes, upstream service warnings) are recorded as
``Diagnostic`` entries on the result instead; see ``diagnostics.py``.
"""


class RdbIngestError(Exception):
    """Base exception for all nwis-rdb-ingest errors."""


class MalformedHeaderError(RdbIngestError):
    """Raised when the two RDB header lines cannot be read as a schema.

    This happens if:
    - The document ends before the header-name or header-type line.
    - The name and type lines carry different token counts (after
      trailing empty tokens are dropped).
    - A column name appears more than once.
    """


class FetchError(RdbIngestError):
    """Raised when the web service cannot be reached or answers with an error.

    Service-level *warnings* (no data found, HTML error page) are not
    errors: they are returned in ``FetchResult.header_info["warn"]``.
    """


class ExportError(RdbIngestError):
    """Raised when the exporter fails to write output files.

    For example, permission errors, disk full, or unsupported format.
    """
