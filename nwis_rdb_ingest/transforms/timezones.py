"""
Timezone normalization transform for nwis-rdb-ingest.

NWIS reports local clock times next to a timezone-code column holding
legacy US abbreviations (``EST``, ``PDT``, ...). This transform turns
those naive local timestamps into absolute instants expressed in the
caller's timezone.

Supported codes and their offsets (hours west of UTC):
  EST 5   EDT 4   CST 6   CDT 5   MST 7   MDT 6   PST 8   PDT 7
  AKST 9  AKDT 8  HAST 10 HST 10  UTC 0   GMT 0   "" 0    missing 0

Codes not in the table are applied with a zero offset and reported as a
diagnostic; legacy data regularly contains blank or irregular codes.
"""

from __future__ import annotations

import logging

import pandas as pd

from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.parsers.base import Table

logger = logging.getLogger(__name__)

# Mapping from reported timezone code to hours west of UTC
TZ_OFFSETS: dict[str, int] = {
    "EST": 5,
    "EDT": 4,
    "CST": 6,
    "CDT": 5,
    "MST": 7,
    "MDT": 6,
    "PST": 8,
    "PDT": 7,
    "AKST": 9,
    "AKDT": 8,
    "HAST": 10,
    "HST": 10,
    "UTC": 0,
    "GMT": 0,
    "": 0,
}


def lookup_offset(code: object) -> int | None:
    """Hours to add to a local time in zone *code* to reach UTC.

    Returns:
        The offset, ``0`` for missing codes, or ``None`` if the code is
        not in ``TZ_OFFSETS``.
    """
    if code is None or (isinstance(code, float) and pd.isna(code)):
        return 0
    return TZ_OFFSETS.get(str(code).strip())


def _swap_columns(table: Table, first: str, second: str) -> None:
    order = table.columns
    i, j = order.index(first), order.index(second)
    order[i], order[j] = order[j], order[i]
    table.reorder(order)


def normalize_timezones(
    table: Table,
    tz_column: str,
    datetime_columns: list[str],
    tz: str = "UTC",
    flip: bool = True,
    reported_suffix: str = "_reported",
) -> Table:
    """Shift timestamp columns to UTC by row code, then express them in *tz*.

    Steps:
    1. Copy the original codes into ``<tz_column>_reported`` (kept as-is if
       that column already exists, so a second pass never loses them).
    2. Naive timestamps are read as local time in their row's zone and
       shifted to UTC. Timezone-aware timestamps are already absolute and
       are not shifted again.
    3. Convert every target column to *tz*.
    4. Set ``tz_column`` to *tz* on rows where any target timestamp is
       present.
    5. If *flip*, swap the positions of ``tz_column`` and its reported
       column.
    6. Drop target columns whose values are all missing.

    Args:
        table: Working table containing *tz_column* and *datetime_columns*.
        tz_column: Column holding timezone codes.
        datetime_columns: Timestamp columns to normalize.
        tz: Output timezone name (IANA), e.g. ``"America/Chicago"``.
        flip: Swap the code and reported-code column positions afterwards.
        reported_suffix: Suffix of the column preserving the original codes.

    Returns:
        A new Table.
    """
    table = table.copy()
    codes = table.df[tz_column]

    reported = f"{tz_column}{reported_suffix}"
    if reported not in table.kinds:
        table.set_column(reported, codes.copy(), table.kinds[tz_column])

    offsets = codes.map(lookup_offset)
    unknown = sorted({str(c) for c in codes[offsets.isna()]})
    for code in unknown:
        table.record(
            Diagnostic(
                kind=DiagnosticKind.UNKNOWN_TIMEZONE_CODE,
                column=tz_column,
                message=f"Unrecognized timezone code '{code}'; applied zero offset.",
            )
        )
    shift = pd.to_timedelta(offsets.fillna(0).astype("int64"), unit="h")

    for col in datetime_columns:
        values = table.df[col]
        if values.dt.tz is None:
            values = (values + shift).dt.tz_localize("UTC")
        table.df[col] = values.dt.tz_convert(tz)

    if datetime_columns:
        has_time = table.df[datetime_columns].notna().any(axis=1)
        table.df[tz_column] = table.df[tz_column].where(~has_time, tz)

    logger.info(
        "Normalized %s by '%s' to %s (%d unknown code(s))",
        datetime_columns, tz_column, tz, len(unknown),
    )

    if flip:
        _swap_columns(table, tz_column, reported)

    # A zero-row table is empty, not all-missing: direct callers keep their columns
    empty = [c for c in datetime_columns if len(table.df) and table.df[c].isna().all()]
    if empty:
        logger.info("Dropping all-missing timestamp column(s): %s", empty)
        table.drop_columns(empty)

    return table
