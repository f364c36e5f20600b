"""
Configuration for the cwreporter package.

ReportConfiguration holds the frozen options of one reporter. The loader and
validators build it from the ``[reporter]`` table of a TOML file. The fluent
ReporterBuilder lives in config.builder.
"""

from .reporter_config import DEFAULT_PERCENTILES, ReportConfiguration
from .loader import load_reporter_table, load_toml_file
from .validators import validate_reporter_config

__all__ = [
    "DEFAULT_PERCENTILES",
    "ReportConfiguration",
    "load_reporter_table",
    "load_toml_file",
    "validate_reporter_config",
]
