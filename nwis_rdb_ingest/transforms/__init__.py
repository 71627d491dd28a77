"""
Transforms sub-package for nwis-rdb-ingest.

Contains the composable steps applied to a typed ``Table`` after reading.
Each transform takes a Table (+ options) and returns a new Table.

Design: Pipeline Pattern
- pipeline.py orchestrates the sequence of transforms.
- Individual transforms are in separate modules for testability:
  - numbers.py: All-or-nothing numeric coercion of value (``_va``) columns.
  - datetimes.py: Merge date/time column pairs and legacy layouts.
  - timezones.py: Shift timestamps by reported timezone code to the
    requested output timezone.
"""
