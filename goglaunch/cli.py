"""Command-line entry point for goglaunch.

The wrapper takes no options of its own. Every argument after the program
name is handed to the built gog binary untouched, so settings come from
`.goglaunch/config.toml` and GOGLAUNCH_* environment variables instead.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, LaunchConfig
from .errors import LauncherError
from .launcher import Launcher


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI.

    By default nothing is logged to the console, leaving stdout and stderr to
    the compiler and the built binary. In verbose mode, DEBUG-level logs go
    to stderr.
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if verbose:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        root_logger.addHandler(console_handler)
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(logging.WARNING)
        # Keep logging's last-resort handler from printing warnings
        root_logger.addHandler(logging.NullHandler())


def main(argv: Optional[List[str]] = None, cwd: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        argv: Arguments to forward. If None, uses sys.argv[1:]
        cwd: Project root. If None, uses the current working directory

    Returns:
        Exit status for the wrapper process
    """
    try:
        config = LaunchConfig.from_environment(argv=argv, cwd=cwd)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.verbose)

    try:
        return Launcher(config).run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130
    except LauncherError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
