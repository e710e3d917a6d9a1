"""
Utility helpers used by the export tool.

This subpackage exposes convenience functions for structured logging and
the pre-flight configuration checks.
"""

from .errors import ERRORS, report_error, report_ok
from .pre_flight_checks import PreFlightCheckError, run_notion_pre_flight_checks

__all__ = [
    "ERRORS",
    "report_error",
    "report_ok",
    "PreFlightCheckError",
    "run_notion_pre_flight_checks",
]
