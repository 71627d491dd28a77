"""
Date/time reconstruction transform for nwis-rdb-ingest.

NWIS splits many timestamps over two columns sharing a base name
(``sample_dt`` + ``sample_tm``) and reports the timezone in a third
(``sample_tz_cd``, ``sample_time_datum_cd``, or a shared ``tz_cd``).
This transform merges each pair into one ``<base>_dateTime`` column and
hands it to the timezone normalizer.

Handled layouts, in order:
1. Water-quality start/end samples sharing ``sample_start_time_datum_cd``.
2. Generic ``<base>_dt`` + ``<base>_tm`` pairs, with a per-pair zone column.
3. A shared ``tz_cd`` column applied to every timestamp column.
4. Legacy ``DATE`` (date only) and ``DATE`` + ``TIME`` + ``TZCD``.
5. Output renames (``sample_dateTime`` -> ``startDateTime``).

All column names and formats come from the ``NamingConvention``.
"""

from __future__ import annotations

import logging

import pandas as pd

from nwis_rdb_ingest.convention_registry import (
    NamingConvention,
    PairConvention,
    load_conventions,
)
from nwis_rdb_ingest.diagnostics import Diagnostic, DiagnosticKind
from nwis_rdb_ingest.parsers.base import ColumnKind, Table
from nwis_rdb_ingest.transforms.timezones import normalize_timezones

logger = logging.getLogger(__name__)


def parse_with_formats(values: pd.Series, formats: list[str]) -> pd.Series:
    """Parse strings into naive timestamps, trying *formats* in order.

    Each format only fills the cells the previous formats left missing.
    Cells matching no format become ``NaT``.
    """
    text = values.astype(str).str.strip()
    result = pd.Series(pd.NaT, index=values.index, dtype="datetime64[ns]")
    for fmt in formats:
        missing = result.isna()
        if not missing.any():
            break
        result.loc[missing] = pd.to_datetime(text[missing], format=fmt, errors="coerce")
    return result


def find_pair_bases(columns: list[str], pair: PairConvention) -> list[str]:
    """Base names of all ``_dt`` / ``_tm`` columns, in first-seen order.

    A base is listed even if only one half of its pair exists; callers
    check for both halves before merging.
    """
    bases: list[str] = []
    for col in columns:
        base = pair.base_of(col)
        if base is not None and base not in bases:
            bases.append(base)
    return bases


def _apply_sample_datum(table: Table, convention: NamingConvention, bases: list[str]) -> None:
    """Route the shared sample datum column into ``tz_cd`` (in place)."""
    sample = convention.sample
    if sample is None:
        return
    if sample.start_base not in bases or sample.end_base not in bases:
        return
    if sample.datum_column not in table.kinds:
        return

    datum = table.df[sample.datum_column]
    kind = table.kinds[sample.datum_column]
    table.set_column(convention.shared_tz_column, datum.copy(), kind)
    for column in (sample.datum_column, sample.end_datum_column):
        table.set_column(convention.reported_name(column), datum.copy(), kind)
    table.drop_columns([sample.datum_column])
    logger.debug("Using %s as shared timezone source", sample.datum_column)


def _merge_pair(table: Table, base: str, pair: PairConvention) -> pd.Series | None:
    """Parse ``<base>_dt`` + ``<base>_tm`` into timestamps, or ``None``."""
    date_col = f"{base}{pair.date_suffix}"
    time_col = f"{base}{pair.time_suffix}"
    if date_col not in table.kinds or time_col not in table.kinds:
        return None
    combined = (
        table.df[date_col].astype(str).str.strip()
        + " "
        + table.df[time_col].astype(str).str.strip()
    )
    values = parse_with_formats(combined, pair.datetime_formats)
    if values.isna().all():
        table.record(
            Diagnostic(
                kind=DiagnosticKind.UNPARSEABLE_TIMESTAMP_PAIR,
                column=base,
                message=(
                    f"No row of {date_col} + {time_col} parsed as a date-time; "
                    "pair left unmerged."
                ),
            )
        )
        return None
    return values


def _digits(table: Table, column: str) -> pd.Series:
    """Column cells as text; numeric cells keep only their integer digits."""
    values = table.df[column]
    if table.kinds[column] is ColumnKind.NUMERIC:
        # A blank cell makes the column float: 20120901 reads back as 20120901.0
        return values.map(lambda v: "" if pd.isna(v) else f"{v:.0f}")
    return values.astype(str).str.strip()


def _reconstruct_legacy(table: Table, convention: NamingConvention, tz: str) -> Table:
    legacy = convention.legacy
    if legacy is None or legacy.date_column not in table.kinds:
        return table

    dates = parse_with_formats(_digits(table, legacy.date_column), legacy.date_formats)
    table.set_column(legacy.date_column, dates, ColumnKind.TIMESTAMP)

    if legacy.time_column in table.kinds and legacy.tz_column in table.kinds:
        combined = (
            dates.dt.strftime("%Y-%m-%d")
            + " "
            + _digits(table, legacy.time_column)
        )
        values = parse_with_formats(combined, [legacy.datetime_format])
        table.set_column(legacy.output_column, values, ColumnKind.TIMESTAMP)
        # Legacy ordering puts the reported code where the live code was
        table = normalize_timezones(
            table,
            legacy.tz_column,
            [legacy.output_column],
            tz,
            flip=True,
            reported_suffix=convention.reported_suffix,
        )
    return table


def reconstruct_datetimes(
    table: Table,
    tz: str = "UTC",
    convention: NamingConvention | None = None,
) -> Table:
    """Merge date/time column pairs and normalize them to *tz*.

    Args:
        table: Working table after numeric coercion.
        tz: Output timezone (IANA name).
        convention: Naming convention; defaults to the built-in ``rdb1``.

    Returns:
        A new Table with ``<base>_dateTime`` columns (``TIMESTAMP``) added,
        timezone-code columns normalized and their originals kept in
        ``*_reported`` columns.
    """
    convention = convention or load_conventions()
    pair = convention.pair
    table = table.copy()

    bases = find_pair_bases(table.columns, pair)
    _apply_sample_datum(table, convention, bases)

    for base in bases:
        values = _merge_pair(table, base, pair)
        if values is None:
            continue
        name = f"{base}{pair.output_suffix}"
        table.set_column(name, values, ColumnKind.TIMESTAMP)
        logger.info("Merged %s date/time pair into '%s'", base, name)

        tz_name = next(
            (f"{base}{s}" for s in pair.tz_suffixes if f"{base}{s}" in table.kinds),
            None,
        )
        if tz_name is not None:
            table = normalize_timezones(
                table, tz_name, [name], tz, reported_suffix=convention.reported_suffix
            )

    shared = convention.shared_tz_column
    if shared in table.kinds:
        timestamp_cols = table.columns_of_kind(ColumnKind.TIMESTAMP)
        if timestamp_cols:
            table = normalize_timezones(
                table,
                shared,
                timestamp_cols,
                tz,
                flip=False,
                reported_suffix=convention.reported_suffix,
            )

    table = _reconstruct_legacy(table, convention, tz)

    renames = {old: new for old, new in convention.renames.items() if old in table.kinds}
    if renames:
        table.rename_columns(renames)

    return table
