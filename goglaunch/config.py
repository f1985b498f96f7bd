"""Launch configuration for goglaunch.

All process-wide ambient state (working directory, platform, argv and the
environment) is read once into a LaunchConfig so the launcher itself never
touches it. Optional build settings come from `.goglaunch/config.toml`,
discovered by searching upward from the project root until a `.git`
directory is found.
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

# Check Python version for tomllib support (Python 3.11+)
if sys.version_info < (3, 11):
    raise RuntimeError(
        "goglaunch requires Python 3.11 or greater for tomllib support. "
        f"Current version: {sys.version_info.major}.{sys.version_info.minor}"
    )

import tomllib  # Python 3.11+ standard library

from goglaunch.errors import LauncherError


CONFIG_DIR_NAME = ".goglaunch"
CONFIG_FILE_NAME = "config.toml"
CONFIG_SECTION = "goglaunch"

DEFAULT_BINARY_NAME = "gog"
DEFAULT_OUTPUT_DIR = "bin"
DEFAULT_PACKAGE = "./cmd/gog"
DEFAULT_VERSION_PACKAGE = "github.com/steipete/gogcli/internal/cmd"

# Environment variables read by LaunchConfig.from_environment()
ENV_GO = "GOGLAUNCH_GO"
ENV_GIT = "GOGLAUNCH_GIT"
ENV_VERBOSE = "GOGLAUNCH_VERBOSE"

_STRING_KEYS = ("binary_name", "output_dir", "package", "version_package", "go", "git")
_BOOL_KEYS = ("verbose",)
_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(LauncherError):
    """Raised when configuration file operations fail."""
    pass


def is_windows_platform(platform: str) -> bool:
    """Check whether a sys.platform value names Windows."""
    return platform.startswith('win')


@dataclass
class LaunchConfig:
    """Everything the launcher needs to know about its surroundings.

    Attributes:
        project_root: Directory the build runs against (normally the cwd).
        platform: A sys.platform value; selects the executable suffix.
        argv: Arguments forwarded verbatim to the built binary.
        binary_name: Base name of the built executable.
        output_dir: Directory under project_root that receives the binary.
        package: Go package path passed to `go build`.
        version_package: Import path holding the version/commit/date variables.
        go: Go toolchain executable.
        git: Git executable used for the metadata queries.
        verbose: Show debug logging on stderr.
    """
    project_root: Path
    platform: str = sys.platform
    argv: List[str] = field(default_factory=list)
    binary_name: str = DEFAULT_BINARY_NAME
    output_dir: str = DEFAULT_OUTPUT_DIR
    package: str = DEFAULT_PACKAGE
    version_package: str = DEFAULT_VERSION_PACKAGE
    go: str = "go"
    git: str = "git"
    verbose: bool = False

    @property
    def executable_name(self) -> str:
        """Binary file name with the platform-specific suffix applied."""
        if is_windows_platform(self.platform):
            return f"{self.binary_name}.exe"
        return self.binary_name

    @property
    def bin_dir(self) -> Path:
        return Path(self.project_root) / self.output_dir

    @property
    def output_path(self) -> Path:
        return self.bin_dir / self.executable_name

    @classmethod
    def from_environment(
        cls,
        argv: Optional[Sequence[str]] = None,
        cwd: Optional[Path] = None,
        platform: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "LaunchConfig":
        """Build a LaunchConfig from the running process.

        Values come from, lowest to highest precedence: built-in defaults,
        the config file, then environment variables.

        Args:
            argv: Arguments to forward. If None, uses sys.argv[1:]
            cwd: Project root. If None, uses Path.cwd()
            platform: Platform string. If None, uses sys.platform
            env: Environment mapping. If None, uses os.environ

        Returns:
            A populated LaunchConfig

        Raises:
            ConfigError: If a config file exists but is invalid
        """
        if argv is None:
            argv = sys.argv[1:]
        if cwd is None:
            cwd = Path.cwd()
        if platform is None:
            platform = sys.platform
        if env is None:
            env = os.environ

        settings = load_config(cwd)

        if env.get(ENV_GO):
            settings["go"] = env[ENV_GO]
        if env.get(ENV_GIT):
            settings["git"] = env[ENV_GIT]
        if env.get(ENV_VERBOSE, "").strip().lower() in _TRUTHY:
            settings["verbose"] = True

        return cls(
            project_root=Path(cwd).resolve(),
            platform=platform,
            argv=list(argv),
            **settings,
        )


def find_config_file(cwd: Path) -> Optional[Path]:
    """Find .goglaunch/config.toml by searching upward from cwd.

    Stops after checking the directory that contains .git (project boundary)
    or at the filesystem root.

    Args:
        cwd: Directory to start the search from

    Returns:
        Path to config file if found, None otherwise
    """
    current = Path(cwd).resolve()  # Resolve symlinks and normalize
    root = Path(current.anchor)

    while True:
        config_file = current / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if config_file.is_file():
            return config_file
        if (current / ".git").exists() or current == root:
            return None
        current = current.parent


def validate_config(config: Dict[str, Any], config_file: Path) -> Dict[str, Any]:
    """Validate configuration values and filter out unknown keys.

    Args:
        config: Dictionary of configuration values
        config_file: Path to config file (for error messages)

    Returns:
        Validated config dictionary with only known keys

    Raises:
        ConfigError: If any validation fails
    """
    # Unknown keys are dropped for forward compatibility
    validated_config = {
        k: v for k, v in config.items() if k in _STRING_KEYS or k in _BOOL_KEYS
    }

    for key in _STRING_KEYS:
        if key not in validated_config:
            continue
        value = validated_config[key]
        if not isinstance(value, str):
            raise ConfigError(
                f"Invalid value for '{key}' in {config_file}: "
                f"expected string, got {type(value).__name__}"
            )
        if not value.strip():
            raise ConfigError(
                f"Invalid value for '{key}' in {config_file}: must not be empty"
            )

    for key in _BOOL_KEYS:
        if key in validated_config and not isinstance(validated_config[key], bool):
            raise ConfigError(
                f"Invalid value for '{key}' in {config_file}: "
                f"expected boolean, got {type(validated_config[key]).__name__}"
            )

    return validated_config


def load_config(cwd: Optional[Path] = None) -> Dict[str, Any]:
    """Load settings from .goglaunch/config.toml, returning empty dict if not found.

    Raises an exception if the config file exists but cannot be parsed, so users can fix errors.

    Args:
        cwd: Directory to start search from. If None, uses Path.cwd()

    Returns:
        Dictionary with configuration values, or empty dict if config file doesn't exist

    Raises:
        ConfigError: If config file exists but contains invalid TOML, values, or cannot be read
    """
    if cwd is None:
        cwd = Path.cwd()

    config_file = find_config_file(cwd)
    if config_file is None:
        return {}

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(
            f"Failed to parse {config_file}: Invalid TOML syntax - {e}"
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Failed to read {config_file}: {e}"
        ) from e

    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(
            f"Invalid [{CONFIG_SECTION}] in {config_file}: expected a table"
        )
    return validate_config(section, config_file)
