"""
Command execution utilities.

This module provides a single helper for running short-lived external
commands (the node configuration evaluator, the webpack CLI) and capturing
their output.
"""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)


def run_command(
    argv: Sequence[str], cwd: Optional[Path] = None, timeout: Optional[float] = None
) -> Tuple[int, str, str]:
    """Execute a command and capture its output.

    Args:
        argv: Program and arguments to execute.
        cwd: Working directory for the command, or the current one if None.
        timeout: Seconds to wait before giving up, or None to wait forever.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 when the command could not be run at all.

    Note:
        Uses UTF-8 decoding with error replacement so that odd bytes in
        bundler output never abort a watch cycle.
    """
    logger.debug(f"Executing command: {shlex.join(argv)} in '{cwd or Path.cwd()}'")
    try:
        process = subprocess.run(
            list(argv),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError as e:
        logger.error(f"Command not found: {argv[0]}: {type(e).__name__}: {e}")
        return -1, "", f"Error: Command not found '{argv[0]}'"
    except subprocess.TimeoutExpired as e:
        logger.error(f"Command timed out after {timeout}s: {shlex.join(argv)}")
        return -1, "", f"Error: Command timed out after {e.timeout}s"
    except OSError as e:
        logger.error(f"Unexpected error while running {argv[0]}: {type(e).__name__}: {e}", exc_info=True)
        return -1, "", f"An unexpected error occurred: {e}"


def split_command(command: Union[str, Sequence[str]]) -> List[str]:
    """Normalize a command given as a shell-like string or an argv list."""
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def check_executable_installed(name: str) -> bool:
    """Check if an executable is available on the system PATH."""
    return shutil.which(name) is not None
