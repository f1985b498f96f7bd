"""Subprocess access for the launcher.

The launcher only ever needs two kinds of process invocation: one whose
standard streams are inherited from the wrapper (the compiler and the built
binary) and one whose stdout is captured (the git metadata queries). Both go
through the ProcessRunner protocol so tests can swap in a fake.
"""

import logging
import signal
import subprocess
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Protocol, Sequence

from goglaunch.errors import ProcessLaunchError

logger = logging.getLogger(__name__)


@contextmanager
def _sigint_ignored() -> Iterator[None]:
    """Ignore SIGINT in this process for the duration of the block.

    Ctrl-C reaches every process in the foreground group, so the child gets
    it directly and decides how to exit; the wrapper just keeps waiting for
    that status. Signal handlers can only be changed from the main thread.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


class ProcessRunner(Protocol):
    """Capability for running subprocesses synchronously."""

    def run_inherited(self, command: Sequence[str]) -> int:
        """Run a command with stdin/stdout/stderr inherited and return its exit code.

        Raises:
            ProcessLaunchError: If the command cannot be started.
        """
        ...

    def run_captured(self, command: Sequence[str]) -> Optional[str]:
        """Run a command and return its trimmed stdout, or None on any failure."""
        ...


class SubprocessRunner:
    """ProcessRunner backed by the subprocess module.

    Every command runs in `cwd` (the project root) with the wrapper's
    environment. Nothing here applies a timeout; a hung child hangs the
    wrapper with it.
    """

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = cwd

    def run_inherited(self, command: Sequence[str]) -> int:
        cmd = [str(part) for part in command]
        logger.debug("Running %s", cmd)
        try:
            # No stdio arguments: the child shares the wrapper's streams,
            # unbuffered and uncaptured.
            process = subprocess.Popen(cmd, cwd=self.cwd)
        except OSError as e:
            raise ProcessLaunchError(cmd, str(e)) from e

        # Installed after the spawn so the child keeps the default SIGINT
        # disposition instead of inheriting SIG_IGN.
        with _sigint_ignored():
            returncode = process.wait()
        logger.debug("%s exited with %s", cmd[0], returncode)
        return returncode

    def run_captured(self, command: Sequence[str]) -> Optional[str]:
        cmd = [str(part) for part in command]
        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                errors="replace",
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Query %s could not run: %s", cmd, e)
            return None

        if result.returncode != 0:
            logger.debug("Query %s exited with %s", cmd, result.returncode)
            return None
        return (result.stdout or "").strip()
