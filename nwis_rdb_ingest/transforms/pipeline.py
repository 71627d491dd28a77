"""
Transform pipeline orchestrator for nwis-rdb-ingest.

Runs the typed-mode transforms on a freshly read Table:

1. **NumericCoercer**: value (``_va``) columns to numeric, all-or-nothing.
2. **DateTimeReconstructor**: merge date/time pairs and normalize
   timezones (which calls the **TimezoneNormalizer**).

The pipeline receives ``ImportOptions`` so each step can check the
relevant flag. Raw-mode tables (``convert_type=False``) and tables
without rows pass through unchanged.
"""

from __future__ import annotations

import logging

from nwis_rdb_ingest.config import ImportOptions
from nwis_rdb_ingest.convention_registry import NamingConvention, load_conventions
from nwis_rdb_ingest.parsers.base import Table
from nwis_rdb_ingest.transforms.datetimes import reconstruct_datetimes
from nwis_rdb_ingest.transforms.numbers import coerce_value_columns

logger = logging.getLogger(__name__)


class TransformPipeline:
    """Orchestrates the sequence of typed-mode transforms.

    The pipeline is **stateless** -- each call to ``run()`` processes a
    fresh Table independently. Flags in ``ImportOptions`` control which
    steps are executed:

    - ``convert_type``: When ``False``, no step runs.
    - ``as_datetime``: When ``False``, date/time reconstruction is skipped.
    """

    def __init__(
        self,
        options: ImportOptions,
        convention: NamingConvention | None = None,
    ) -> None:
        self.options = options
        self.convention = convention or load_conventions()

    def run(self, table: Table) -> Table:
        """Run all enabled transforms and return the resulting Table."""
        if not self.options.convert_type:
            logger.info("Transforms SKIPPED (convert_type disabled)")
            return table
        if len(table.df) == 0:
            logger.info("Transforms SKIPPED (no data rows)")
            return table

        # -- Step 1: Numeric coercion ----------------------------------------
        logger.info("Step 1/2: Coercing value columns")
        table = coerce_value_columns(table, self.convention)

        # -- Step 2: Date/time reconstruction (configurable) ----------------
        if self.options.as_datetime:
            logger.info("Step 2/2: Reconstructing date/times (tz=%s)", self.options.tz)
            table = reconstruct_datetimes(table, self.options.tz, self.convention)
        else:
            logger.info("Step 2/2: Date/time reconstruction SKIPPED (as_datetime disabled)")

        return table
