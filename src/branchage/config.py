"""Run settings gathered from the command line."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from branchage.report import DEFAULT_STALE_DAYS

DEFAULT_REMOTE = "origin"
DEFAULT_PROTECT = "main,master"


def split_patterns(value: str) -> list[str]:
    """Turn a comma-separated option value into a list of patterns."""
    return [pattern.strip() for pattern in value.split(",") if pattern.strip()]


@dataclass(frozen=True)
class Settings:
    """Options for a single run."""

    path: Path = Path(".")
    remote: str = DEFAULT_REMOTE
    verbosity: int = 0
    quiet: bool = False
    yes: bool = False
    stale_days: int = DEFAULT_STALE_DAYS
    protect: list[str] = field(default_factory=lambda: split_patterns(DEFAULT_PROTECT))

    def merged(
        self,
        *,
        path: Optional[Path] = None,
        remote: Optional[str] = None,
        verbosity: int = 0,
        quiet: bool = False,
        yes: bool = False,
        **overrides,
    ) -> "Settings":
        """Combine with options given to a subcommand.

        Flags switch on if given at either level, verbosity takes the higher
        count and path/remote given to the subcommand win.
        """
        return replace(
            self,
            path=path if path is not None else self.path,
            remote=remote if remote is not None else self.remote,
            verbosity=max(self.verbosity, verbosity),
            quiet=self.quiet or quiet,
            yes=self.yes or yes,
            **overrides,
        )
