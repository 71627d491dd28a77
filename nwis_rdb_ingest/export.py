"""
Exporter for nwis-rdb-ingest.

Writes a RecordSet to the output directory in CSV or Parquet.

Output file naming convention:
  {table_name}.{format}          -- the data, e.g. "data.parquet"
  _meta.{format}                 -- one row per column (kind, source, ...)
  {table_name}_comment.txt       -- the RDB comment block, verbatim

Why Parquet is the default:
- Preserves column dtypes, including timezone-aware timestamps, so the
  result does not need re-parsing on load.
- Columnar compression reduces file size significantly.

CSV is supported for tools that don't read Parquet.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import pandas as pd

from nwis_rdb_ingest.exceptions import ExportError
from nwis_rdb_ingest.record_set import RecordSet

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}


def _write_dataframe(
    df: pd.DataFrame,
    path: Path,
    output_format: str,
) -> None:
    """Write a single DataFrame to disk in the specified format.

    Raises:
        ExportError: If writing fails for any reason.
    """
    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc


def build_meta_table(record_set: RecordSet, table_name: str) -> pd.DataFrame:
    """Build the ``_meta`` table: one row per column of *record_set*.

    Columns: table_name, column, value_kind, source, retrieval_time,
    row_count, diagnostics (``;``-joined messages scoped to that column).
    """
    meta = record_set.metadata
    retrieval_time = meta.retrieval_time.isoformat(timespec="seconds")

    rows: list[dict] = []
    for col in record_set.columns:
        messages = [d.message for d in record_set.diagnostics if d.column == col]
        rows.append(
            {
                "table_name": table_name,
                "column": col,
                "value_kind": record_set.kinds[col].value,
                "source": meta.source,
                "retrieval_time": retrieval_time,
                "row_count": len(record_set),
                "diagnostics": "; ".join(messages),
            }
        )

    columns = [
        "table_name", "column", "value_kind", "source",
        "retrieval_time", "row_count", "diagnostics",
    ]
    return pd.DataFrame(rows, columns=columns)


def export_record_set(
    record_set: RecordSet,
    output_dir: str | Path,
    table_name: str = "data",
    output_format: Literal["csv", "parquet"] = "parquet",
) -> list[str]:
    """Write a RecordSet, its ``_meta`` table and its comment block to disk.

    The output directory is created recursively if it does not exist.

    Args:
        record_set: The parsed result.
        output_dir: Directory to write files into (created if needed).
        table_name: File stem of the data table.
        output_format: "csv" or "parquet".

    Returns:
        List of file paths (as strings) that were written: data table,
        ``_meta``, then the comment file.

    Raises:
        ExportError: If *output_format* is unsupported, or if any write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    written: list[str] = []

    # -- Write data table ----------------------------------------------------
    data_path = out / f"{table_name}.{output_format}"
    _write_dataframe(record_set.data, data_path, output_format)
    written.append(str(data_path))
    logger.info(
        "Exported table '%s' -> %s (%d rows, %d cols)",
        table_name,
        data_path.name,
        len(record_set),
        len(record_set.columns),
    )

    # -- Write _meta table ---------------------------------------------------
    meta_path = out / f"_meta.{output_format}"
    _write_dataframe(build_meta_table(record_set, table_name), meta_path, output_format)
    written.append(str(meta_path))

    # -- Write comment block -------------------------------------------------
    comment_path = out / f"{table_name}_comment.txt"
    try:
        comment_path.write_text(
            "".join(f"{line}\n" for line in record_set.metadata.comment),
            encoding="utf-8",
        )
    except OSError as exc:
        raise ExportError(f"Failed to write {comment_path.name}: {exc}") from exc
    written.append(str(comment_path))

    return written
