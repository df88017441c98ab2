"""Test configuration and fixtures."""

import time
from pathlib import Path
from typing import Callable, Generator

import pytest
from git import Actor, Repo

from branchage.git import SECONDS_PER_DAY

AUTHOR = Actor("Test User", "test@example.com")

# Extra hour keeps whole-day ages stable while the test runs
SLACK = 3600


def _days_ago(days: int) -> int:
    """Unix time a little more than ``days`` days in the past."""
    return int(time.time()) - days * SECONDS_PER_DAY - SLACK


def commit_file(repo: Repo, name: str, timestamp: int) -> None:
    """Commit a new file on the checked-out branch with a fixed date."""
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{name}\n")
    repo.index.add([name])
    date = f"{timestamp} +0000"
    repo.index.commit(f"Add {name}", author=AUTHOR, committer=AUTHOR, author_date=date, commit_date=date)


@pytest.fixture
def days_ago() -> Callable[[int], int]:
    """Timestamp helper: ``days_ago(n)`` is a little more than n days back."""
    return _days_ago


@pytest.fixture
def make_commit() -> Callable[[Repo, str, int], None]:
    """Commit helper: ``make_commit(repo, filename, unix_time)``."""
    return commit_file


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a local repository with a bare remote.

    Branches:
        main: last commit 2 days ago, pushed to origin
        feature/x: last commit 45 days ago, local only

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True, initial_branch="main")
    local_repo = Repo.init(local_path, initial_branch="main")

    local_repo.config_writer().set_value("user", "name", AUTHOR.name).release()
    local_repo.config_writer().set_value("user", "email", AUTHOR.email).release()

    commit_file(local_repo, "README.md", _days_ago(2))
    main_branch = local_repo.heads.main

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)

    # Older than its parent on purpose; git does not care about date order
    feature = local_repo.create_head("feature/x")
    feature.checkout()
    commit_file(local_repo, "feature.txt", _days_ago(45))

    main_branch.checkout()

    yield local_path, remote_path


@pytest.fixture
def local_repo(test_env: tuple[Path, Path]) -> Repo:
    """GitPython handle on the local test repository."""
    local_path, _ = test_env
    return Repo(local_path)


@pytest.fixture
def remote_repo(test_env: tuple[Path, Path]) -> Repo:
    """GitPython handle on the bare remote."""
    _, remote_path = test_env
    return Repo(remote_path)
