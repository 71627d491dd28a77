"""
Naming-convention definitions sub-package for nwis-rdb-ingest.

Contains YAML files that declare the column-naming conventions the
date/time reconstructor and numeric coercer depend on. The loader module
(convention_registry.py in the parent package) reads these files at
runtime.
"""
