"""
External process helpers.

Blocks never call subprocess directly: sensor reads go through
``run_command`` (bounded by a timeout so a hung tool cannot stall the
scheduler) and click handlers go through ``spawn`` (fire-and-forget).
"""

import logging
import subprocess
from typing import List, Optional

from .errors import ClickSpawnError

logger = logging.getLogger(__name__)

# Default bound for external commands in seconds
DEFAULT_TIMEOUT = 10.0


def run_command(args: List[str], timeout: Optional[float] = DEFAULT_TIMEOUT) -> str:
    """
    Run a command and return its stripped stdout.

    Args:
        args: Program and arguments (no shell)
        timeout: Seconds to wait before giving up

    Returns:
        Decoded standard output

    Raises:
        OSError: If the program cannot be started
        subprocess.TimeoutExpired: If the program runs longer than timeout
    """
    logger.debug(f"Running command: {' '.join(args)}")
    result = subprocess.run(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        timeout=timeout,
    )
    if result.returncode != 0:
        logger.debug(f"Command {args[0]} exited with {result.returncode}")
    stdout = result.stdout or b""
    if isinstance(stdout, bytes):
        stdout = stdout.decode("utf-8", errors="replace")
    return stdout.strip()


def spawn(command: str) -> subprocess.Popen:
    """
    Launch a shell command without waiting for it.

    Security Note:
    ---------------
    The command runs with shell=True so that configs can use pipes,
    redirects and variable expansion. Only load configs from trusted
    sources.

    Args:
        command: Shell command line

    Returns:
        The started process (callers are not expected to wait on it)

    Raises:
        ClickSpawnError: If the process could not be started
    """
    logger.info(f"Spawning command: {command}")
    try:
        return subprocess.Popen(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise ClickSpawnError(command, e) from e
