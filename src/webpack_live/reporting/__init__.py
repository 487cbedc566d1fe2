"""
Console reporting for the webpack_live package.
"""

from .console import EXIT_HINT, ConsoleReporter
from .formatter import format_asset, format_problems, format_report, format_report_list

__all__ = [
    "EXIT_HINT",
    "ConsoleReporter",
    "format_asset",
    "format_problems",
    "format_report",
    "format_report_list",
]
