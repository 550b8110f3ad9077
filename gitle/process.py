"""
Execution of external git and build-tool commands.

Commands run synchronously in a given working directory. With `show_output`
the child inherits the parent's standard streams, which is handy for
debugging but may print credentials embedded in clone URLs, SSH host keys or
user names. Otherwise output is captured and returned to the caller.

Every command runs in its own process group under a bounded wait: when the
timeout expires the whole group is terminated so a hung git or build client
cannot stall a refresh indefinitely.
"""

import logging
import os
import re
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

# exit code reported when the executable cannot be started
COMMAND_NOT_FOUND = 127
TIMEOUT_EXIT_CODE = -1
_GRACE_PERIOD = 5

_USERINFO = re.compile(r"(://)[^/@\s]+@")


@dataclass(frozen=True)
class CommandResult:
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def error_text(self) -> str:
        return redact(self.stderr.strip())


def redact(text: str) -> str:
    """Mask credentials embedded in URLs."""
    return _USERINFO.sub(r"\1***@", text)


def _terminate(process: subprocess.Popen) -> None:
    """Terminate a process and its children, escalating to a kill."""
    if os.name == "nt":
        process.kill()
        return

    try:
        os.killpg(os.getpgid(process.pid), signal.SIGTERM)
        try:
            process.wait(timeout=_GRACE_PERIOD)
            logger.debug("Process terminated gracefully.")
        except subprocess.TimeoutExpired:
            logger.warning("Process did not terminate gracefully, forcing kill...")
            os.killpg(os.getpgid(process.pid), signal.SIGKILL)
    except ProcessLookupError:
        # already gone
        pass


def run_command(
    command: List[str],
    cwd: Union[str, Path],
    show_output: bool = False,
    timeout: Optional[float] = None,
) -> CommandResult:
    """
    Run `command` in `cwd` and wait for it to finish.

    Args:
        command: Command vector, e.g. ["git", "pull"]
        cwd: Working directory
        show_output: Connect the child's streams to ours instead of capturing
        timeout: Seconds to wait before terminating the command, None waits forever

    Returns:
        CommandResult with the exit code and any captured output. A timeout
        yields exit code -1 and `timed_out=True`; a missing executable yields
        exit code 127.
    """
    logger.debug(f"Running `{redact(' '.join(command))}` in {cwd}")

    stream = None if show_output else subprocess.PIPE
    try:
        process = subprocess.Popen(
            command,
            cwd=str(cwd),
            stdout=stream,
            stderr=stream,
            stdin=subprocess.DEVNULL,
            # build tools may print in a legacy code page
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )
    except OSError as e:
        logger.debug(f"Failed to start `{command[0]}`: {e}")
        return CommandResult(exit_code=COMMAND_NOT_FOUND, stderr=str(e))

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.error(
            f"`{redact(' '.join(command))}` timed out after {timeout}s. "
            "Terminating process and all children..."
        )
        _terminate(process)
        stdout, stderr = process.communicate()
        message = f"Command timed out after {timeout}s"
        if stderr:
            message = f"{stderr.strip()}\n{message}"
        return CommandResult(
            exit_code=TIMEOUT_EXIT_CODE,
            stdout=stdout or "",
            stderr=message,
            timed_out=True,
        )
    finally:
        if process.poll() is None:
            _terminate(process)
            process.wait()

    logger.debug(f"`{command[0]}` exit code: {process.returncode}")
    return CommandResult(
        exit_code=process.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
    )
