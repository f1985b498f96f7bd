"""Build metadata injected into the gog binary at link time.

The version label, short commit and build date end up in three package-level
string variables of the target program via `go build -ldflags "-X ..."`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from goglaunch.runner import ProcessRunner

logger = logging.getLogger(__name__)

FALLBACK_VERSION = "dev"
FALLBACK_COMMIT = ""

# Length of the abbreviated commit hash requested from git
COMMIT_HASH_LENGTH = 12


@dataclass(frozen=True)
class BuildMetadata:
    """Version information for a single build.

    Attributes:
        version: `git describe` label, or "dev".
        commit: Short commit hash, or "".
        date: UTC build time, ISO-8601 with whole seconds and a trailing Z.
    """
    version: str
    commit: str
    date: str

    def describe(self) -> str:
        """Render the metadata the way `gog version` prints it.

        Examples:
            v1.2.0 (0123456789ab 2025-01-02T03:04:05Z)
            dev (2025-01-02T03:04:05Z)
        """
        version = self.version.strip() or FALLBACK_VERSION
        commit = self.commit.strip()
        date = self.date.strip()
        if commit and date:
            return f"{version} ({commit} {date})"
        if commit or date:
            return f"{version} ({commit or date})"
        return version

    def ldflags(self, version_package: str) -> str:
        """Build the -ldflags value that sets the version variables in version_package."""
        return " ".join(self.linker_assignments(version_package))

    def linker_assignments(self, version_package: str) -> List[str]:
        return [
            f"-X {version_package}.version={self.version}",
            f"-X {version_package}.commit={self.commit}",
            f"-X {version_package}.date={self.date}",
        ]


def format_build_date(moment: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with the fractional seconds dropped.

    Naive datetimes are taken to be UTC already.

    >>> format_build_date(datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc))
    '2025-01-02T03:04:05Z'
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def describe_command(git: str = "git") -> List[str]:
    return [git, "describe", "--tags", "--always", "--dirty"]


def revision_command(git: str = "git") -> List[str]:
    return [git, "rev-parse", f"--short={COMMIT_HASH_LENGTH}", "HEAD"]


def resolve_metadata(
    runner: ProcessRunner,
    git: str = "git",
    clock: Optional[Callable[[], datetime]] = None,
) -> BuildMetadata:
    """Query git for the version label and commit, and stamp the build time.

    Neither query can fail the build: a missing git, a directory that is not a
    repository, a non-zero exit or empty output all produce the fallback
    value for that field.

    Args:
        runner: Runner used for the captured git queries
        git: Git executable
        clock: Returns the current time. If None, uses utc_now()

    Returns:
        The resolved BuildMetadata
    """
    if clock is None:
        clock = utc_now

    version = runner.run_captured(describe_command(git)) or FALLBACK_VERSION
    commit = runner.run_captured(revision_command(git)) or FALLBACK_COMMIT
    date = format_build_date(clock())

    metadata = BuildMetadata(version=version, commit=commit, date=date)
    logger.debug("Resolved build metadata: %s", metadata.describe())
    return metadata
