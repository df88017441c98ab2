"""Git repository operations."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import BadName, BadObject
from git.refs import Head, Reference, RemoteReference

from branchage.log import TRACE

SECONDS_PER_DAY = 86400
INVALID_NAME = "<invalid UTF-8>"
UNKNOWN_REPO_NAME = "Unknown"


class BranchKind(Enum):
    """Branch kind."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class BranchRecord:
    """A branch and the age of its tip commit."""

    name: str
    kind: BranchKind
    age_days: int


class GitError(Exception):
    """Git operation error."""


class RepositoryNotFound(GitError):
    """No usable repository at the given path."""


class RemoteFetchFailed(GitError):
    """Fetching from the remote failed."""


class BranchEnumerationFailed(GitError):
    """Listing the repository's branches failed."""


def age_in_days(commit_time: int, now: int) -> int:
    """Whole days between a commit timestamp and ``now``.

    Commits dated after ``now`` (clock skew) are reported as 0 days old.
    """
    return max(0, (now - commit_time) // SECONDS_PER_DAY)


def _branch_name(ref: Reference) -> str:
    name = ref.name
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        # Ref names read from disk keep undecodable bytes as surrogates
        return INVALID_NAME
    return name


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Union[Path, str] = ".", logger: Optional[logging.Logger] = None) -> None:
        """Open the repository at ``path``.

        Raises:
            RepositoryNotFound: If ``path`` is not a git working tree
        """
        self.log = logger or logging.getLogger(__name__)
        try:
            self.repo: Repo = Repo(path)
        except (NoSuchPathError, InvalidGitRepositoryError) as err:
            raise RepositoryNotFound(f"No Git repository found in {path}") from err
        except (GitCommandError, ValueError) as err:
            raise RepositoryNotFound(f"Failed to open repository: {err}") from err
        if self.repo.bare:
            raise RepositoryNotFound("Cannot operate on bare repository")
        self.log.debug("Opened repository at %s", self.repo.git_dir)

    def resolve_name(self) -> str:
        """Name of the directory holding the repository's metadata directory."""
        try:
            name = Path(self.repo.git_dir).resolve(strict=True).parent.name
        except OSError as err:
            self.log.warning("Could not resolve repository name: %s", err)
            return UNKNOWN_REPO_NAME
        if not name:
            return UNKNOWN_REPO_NAME
        self.log.debug("Resolved repository name.")
        return name

    def fetch_remote(self, remote_name: str = "origin") -> None:
        """Fetch all updates from a remote.

        This runs a full ``git fetch``:
        - Downloads all branches and tags
        - Updates local remote-tracking branches
        - Prunes remote-tracking branches deleted on the remote
        - Updates ``.git/FETCH_HEAD``

        Authentication is left to git's configured credential helpers.

        Raises:
            RemoteFetchFailed: If the remote is unknown or the fetch fails
        """
        self.log.debug("Setting up remote fetch options...")
        try:
            remote = self.repo.remote(remote_name)
        except ValueError as err:
            raise RemoteFetchFailed(f"Remote '{remote_name}' not found") from err

        try:
            infos = remote.fetch(prune=True, tags=True)
        except GitCommandError as err:
            raise RemoteFetchFailed(f"Failed to fetch from {remote_name}: {err}") from err
        for info in infos:
            self.log.log(TRACE, "Fetched %s (flags=%d)", info.name, info.flags)
        self.log.debug("Fetched from remote.")

    def get_current_branch_name(self) -> str:
        """Get current branch name, or an empty string on a detached HEAD."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return ""

    def _iter_branch_refs(self) -> list[Reference]:
        try:
            refs: list[Reference] = list(Head.list_items(self.repo))
            refs.extend(
                ref
                for ref in RemoteReference.list_items(self.repo)
                # origin/HEAD is a symbolic pointer, not a branch
                if not ref.name.endswith("/HEAD")
            )
        except (GitCommandError, OSError) as err:
            raise BranchEnumerationFailed(f"Failed to list branches: {err}") from err
        return refs

    def scan_branches(self, now: Optional[int] = None) -> list[BranchRecord]:
        """Compute the age of every local and remote-tracking branch.

        Branches whose tip cannot be resolved to a commit are left out.

        Args:
            now: Unix time to measure ages against, defaults to the current time

        Raises:
            BranchEnumerationFailed: If the branch refs cannot be listed
        """
        if now is None:
            now = int(time.time())

        records = []
        for ref in self._iter_branch_refs():
            kind = BranchKind.REMOTE if isinstance(ref, RemoteReference) else BranchKind.LOCAL
            name = _branch_name(ref)
            try:
                commit = ref.commit
                commit_time = commit.committed_date
            except (ValueError, TypeError, BadName, BadObject) as err:
                self.log.debug("Skipping %s branch %s: %s", kind.value, name, err)
                continue

            records.append(BranchRecord(name=name, kind=kind, age_days=age_in_days(commit_time, now)))
            self.log.debug("Found %s:%s branch.", kind.value, name)
            self.log.log(TRACE, "%s -> %s committed at %d", name, commit.hexsha, commit_time)
        return records

    def delete_branch(self, record: BranchRecord) -> bool:
        """Delete a single branch. Returns True if successful.

        Remote-tracking branches are only removed locally; the branch on the
        remote is left alone.
        """
        try:
            if record.kind is BranchKind.REMOTE:
                self.repo.git.branch("-d", "-r", record.name)
            else:
                self.repo.git.branch("-D", record.name)
        except GitCommandError as err:
            self.log.error("Failed to delete %s: %s", record.name, err)
            return False
        self.log.info("Deleted %s branch %s", record.kind.value, record.name)
        return True
