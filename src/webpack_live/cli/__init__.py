"""
Command-line interface for the webpack_live package.
"""

from .main import main_cli, parse_args, run

__all__ = [
    "main_cli",
    "parse_args",
    "run",
]
