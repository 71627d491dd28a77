"""
Structured diagnostics for recoverable parse conditions.

Every stage that works around a data problem (instead of failing) appends
a ``Diagnostic`` to the working table. The list travels through the
pipeline and ends up on ``RecordSet.diagnostics`` so callers can inspect
what was tolerated without scraping log output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Recoverable conditions the parser reports instead of raising."""

    ROW_COUNT_MISMATCH = "row_count_mismatch"
    NUMERIC_COERCION_FAILURE = "numeric_coercion_failure"
    UNPARSEABLE_TIMESTAMP_PAIR = "unparseable_timestamp_pair"
    UNKNOWN_TIMEZONE_CODE = "unknown_timezone_code"
    UPSTREAM_WARNING = "upstream_warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single recoverable condition.

    Attributes:
        kind: What happened.
        message: Human-readable detail.
        column: The affected column, when the condition is column-scoped.
    """

    kind: DiagnosticKind
    message: str
    column: str | None = None

    def log(self) -> None:
        """Emit this diagnostic as a WARNING record."""
        if self.column is None:
            logger.warning("%s: %s", self.kind.value, self.message)
        else:
            logger.warning("%s [%s]: %s", self.kind.value, self.column, self.message)
