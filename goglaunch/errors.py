"""Exception classes for launcher errors.

LauncherError is the base class the CLI catches. Failures of the metadata
queries never reach this hierarchy; they fall back to default values instead.
ConfigError is defined alongside the config loader in goglaunch.config.
"""

from typing import Sequence


class LauncherError(Exception):
    """Base exception for launcher errors.

    All launcher-specific exceptions inherit from this class,
    allowing callers to catch every fatal launcher error with a single handler.
    """
    pass


class OutputDirectoryError(LauncherError):
    """Raised when the output directory cannot be created.

    This aborts the launch before any build is attempted.
    """
    pass


class ProcessLaunchError(LauncherError):
    """Raised when a subprocess cannot be started at all.

    A process that starts and exits non-zero is not an error at this level;
    its status is forwarded instead.

    Attributes:
        command: The command line that failed to start.
    """

    def __init__(self, command: Sequence[str], reason: str):
        self.command = list(command)
        super().__init__(f"Failed to start '{self.command[0]}': {reason}")


__all__ = [
    'LauncherError',
    'OutputDirectoryError',
    'ProcessLaunchError',
]
