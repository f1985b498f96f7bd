"""Build the gog binary, then run it with the caller's arguments.

The launcher walks a fixed sequence of states:

    INIT -> DIRECTORY_READY -> METADATA_RESOLVED -> BUILT -> EXECUTED -> TERMINATED

A failed build jumps straight to TERMINATED with the compiler's status. The
only other ways out are the fatal errors from goglaunch.errors.
"""

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from goglaunch.config import LaunchConfig
from goglaunch.errors import LauncherError, OutputDirectoryError
from goglaunch.metadata import BuildMetadata, resolve_metadata
from goglaunch.runner import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class LauncherState(str, Enum):
    """Progress of a single launch."""
    INIT = "INIT"
    DIRECTORY_READY = "DIRECTORY_READY"
    METADATA_RESOLVED = "METADATA_RESOLVED"
    BUILT = "BUILT"
    EXECUTED = "EXECUTED"
    TERMINATED = "TERMINATED"


def exit_status(returncode: Optional[int]) -> int:
    """Map a subprocess return code to the status the wrapper exits with.

    Children killed by a signal report a negative code (or none at all);
    those have no numeric exit status to forward and become 1.
    """
    if returncode is None or returncode < 0:
        return 1
    return returncode


class Launcher:
    """Compile the target program and exec it, forwarding the exit status.

    One Launcher performs one launch. Call run(), or the individual steps in
    order when the caller needs to observe intermediate state.
    """

    def __init__(
        self,
        config: LaunchConfig,
        runner: Optional[ProcessRunner] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.runner = runner if runner is not None else SubprocessRunner(cwd=config.project_root)
        self.clock = clock
        self.state = LauncherState.INIT
        self.metadata: Optional[BuildMetadata] = None
        self.exit_code: Optional[int] = None

    @property
    def output_path(self) -> Path:
        return self.config.output_path

    def _require(self, expected: LauncherState) -> None:
        if self.state != expected:
            raise LauncherError(
                f"Launcher is in state {self.state.value}, expected {expected.value}"
            )

    def _advance(self, expected: LauncherState, new_state: LauncherState) -> None:
        self._require(expected)
        logger.debug("Launcher state %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    def _terminate(self, code: int) -> int:
        self.exit_code = code
        self.state = LauncherState.TERMINATED
        return code

    def ensure_output_dir(self) -> Path:
        """Create the output directory (and parents) if it does not exist.

        Raises:
            OutputDirectoryError: If the directory cannot be created
        """
        self._require(LauncherState.INIT)
        bin_dir = self.config.bin_dir
        try:
            bin_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(
                f"Failed to create output directory {bin_dir}: {e}"
            ) from e
        self._advance(LauncherState.INIT, LauncherState.DIRECTORY_READY)
        return bin_dir

    def resolve_metadata(self) -> BuildMetadata:
        """Resolve version, commit and date. Never fails on git errors."""
        self._require(LauncherState.DIRECTORY_READY)
        metadata = resolve_metadata(self.runner, git=self.config.git, clock=self.clock)
        self._advance(LauncherState.DIRECTORY_READY, LauncherState.METADATA_RESOLVED)
        self.metadata = metadata
        return metadata

    def build_command(self, metadata: BuildMetadata) -> List[str]:
        return [
            self.config.go,
            "build",
            "-ldflags",
            metadata.ldflags(self.config.version_package),
            "-o",
            str(self.output_path),
            self.config.package,
        ]

    def build(self) -> int:
        """Compile the target with the compiler's output shown unmodified.

        Returns:
            The compiler's exit status (already mapped by exit_status())

        Raises:
            ProcessLaunchError: If the compiler cannot be started
        """
        self._require(LauncherState.METADATA_RESOLVED)
        logger.info("Building %s (%s)", self.output_path, self.metadata.describe())
        code = exit_status(self.runner.run_inherited(self.build_command(self.metadata)))
        if code != 0:
            logger.info("Build failed with status %d", code)
            return self._terminate(code)
        self._advance(LauncherState.METADATA_RESOLVED, LauncherState.BUILT)
        return code

    def execute(self) -> int:
        """Run the built binary with the original arguments and stdio inherited.

        A non-zero status from the binary is the normal forwarding path, not
        an error.

        Raises:
            ProcessLaunchError: If the binary cannot be started
        """
        self._require(LauncherState.BUILT)
        command = [str(self.output_path), *self.config.argv]
        code = exit_status(self.runner.run_inherited(command))
        self._advance(LauncherState.BUILT, LauncherState.EXECUTED)
        return self._terminate(code)

    def run(self) -> int:
        """Perform the whole launch and return the status the wrapper should exit with."""
        if self.state != LauncherState.INIT:
            raise LauncherError("Launcher has already run; create a new one per launch")
        self.ensure_output_dir()
        self.resolve_metadata()
        if self.build() != 0:
            return self.exit_code
        return self.execute()
