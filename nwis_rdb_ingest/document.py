"""
Document splitting for RDB1 files.

An RDB1 document is laid out as::

    # comment / metadata lines ...
    agency_cd<TAB>site_no<TAB>datetime<TAB>...      <- header names
    5s<TAB>15s<TAB>20d<TAB>...                      <- header type tokens
    USGS<TAB>01491000<TAB>2020-10-30 00:00<TAB>...  <- data lines
    ...

``read_lines()`` turns whatever the caller has (text, bytes, a local path)
into a list of lines; ``split_document()`` classifies them. Neither
function interprets cell values.
"""

from __future__ import annotations

import gzip
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from nwis_rdb_ingest.exceptions import MalformedHeaderError

logger = logging.getLogger(__name__)

# Width digits followed by a single type letter, e.g. "15s", "14n", "20d"
_TYPE_TOKEN_RE = re.compile(r"^\d*([A-Za-z])$")


@dataclass(frozen=True)
class ColumnSpec:
    """A column name and its declared RDB type token."""

    name: str
    type_token: str

    @property
    def type_letter(self) -> str | None:
        """Lower-cased type letter (``s``, ``n``, ``d``), or ``None``."""
        match = _TYPE_TOKEN_RE.match(self.type_token.strip())
        return match.group(1).lower() if match else None


@dataclass
class SplitDocument:
    """The four parts of an RDB1 document.

    Attributes:
        comments: Leading comment lines, verbatim (marker included).
        columns: One ``ColumnSpec`` per header name.
        data_lines: Everything after the type line.
    """

    comments: list[str] = field(default_factory=list)
    columns: list[ColumnSpec] = field(default_factory=list)
    data_lines: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def expected_rows(self) -> int:
        return len(self.data_lines)


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Document is not valid UTF-8, decoding as latin-1")
        return raw.decode("latin-1")


def read_lines(source: str | bytes | Path | list[str]) -> list[str]:
    """Turn a document source into a list of lines (no line terminators).

    Args:
        source: One of:
            - ``Path``: a local file; ``.gz`` files are decompressed.
            - ``bytes``: a raw payload (UTF-8, BOM stripped; latin-1
              fallback).
            - ``str``: the document text itself.
            - ``list[str]``: lines that are already split.

    Returns:
        The document's lines.
    """
    if isinstance(source, list):
        return [line.rstrip("\r\n") for line in source]
    if isinstance(source, Path):
        if source.suffix == ".gz":
            with gzip.open(source, "rb") as f:
                raw = f.read()
        else:
            raw = source.read_bytes()
        return _decode(raw).splitlines()
    if isinstance(source, bytes):
        return _decode(source).splitlines()
    return source.lstrip("\ufeff").splitlines()


def _split_header(line: str, delimiter: str) -> list[str]:
    tokens = line.split(delimiter)
    # A trailing delimiter produces empty tokens that are not columns
    while tokens and tokens[-1].strip() == "":
        tokens.pop()
    return tokens


def split_document(
    lines: list[str],
    comment_marker: str = "#",
    delimiter: str = "\t",
) -> SplitDocument:
    """Split RDB lines into comments, column specs and data lines.

    Args:
        lines: Document lines from ``read_lines()``.
        comment_marker: Prefix identifying metadata lines.
        delimiter: Field separator of the header and data lines.

    Returns:
        SplitDocument. ``len(data_lines) == len(lines) - len(comments) - 2``.

    Raises:
        MalformedHeaderError: If the header lines are missing, their token
            counts disagree, or a column name is duplicated.
    """
    n_comments = 0
    while n_comments < len(lines) and lines[n_comments].startswith(comment_marker):
        n_comments += 1

    if n_comments + 2 > len(lines):
        raise MalformedHeaderError(
            f"Document ends before the header lines: {len(lines)} line(s), "
            f"{n_comments} comment line(s)."
        )

    names = _split_header(lines[n_comments], delimiter)
    types = _split_header(lines[n_comments + 1], delimiter)

    if not names:
        raise MalformedHeaderError("Header-name line is empty.")
    if len(names) != len(types):
        raise MalformedHeaderError(
            f"Header has {len(names)} column name(s) but {len(types)} type "
            f"token(s). Names: {names[:10]}"
        )
    duplicated = sorted({n for n in names if names.count(n) > 1})
    if duplicated:
        raise MalformedHeaderError(f"Duplicate column names in header: {duplicated}")

    document = SplitDocument(
        comments=lines[:n_comments],
        columns=[ColumnSpec(name=n, type_token=t) for n, t in zip(names, types)],
        data_lines=lines[n_comments + 2:],
    )
    logger.info(
        "Split document: %d comment line(s), %d column(s), %d data line(s)",
        len(document.comments),
        len(document.columns),
        document.expected_rows,
    )
    return document
