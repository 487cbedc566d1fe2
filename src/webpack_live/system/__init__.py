"""
System interaction helpers for the webpack_live package.
"""

from .commands import check_executable_installed, run_command, split_command

__all__ = [
    "check_executable_installed",
    "run_command",
    "split_command",
]
