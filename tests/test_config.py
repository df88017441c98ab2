"""Tests for run settings."""

from pathlib import Path

from branchage.config import Settings, split_patterns


def test_split_patterns() -> None:
    assert split_patterns("main, release/*,,") == ["main", "release/*"]
    assert split_patterns("") == []


def test_defaults() -> None:
    settings = Settings()
    assert settings.remote == "origin"
    assert settings.stale_days == 30
    assert settings.protect == ["main", "master"]


def test_subcommand_options_merge() -> None:
    base = Settings(path=Path("/repo"), verbosity=2, yes=True)
    merged = base.merged(remote="upstream", verbosity=1, quiet=True, stale_days=7)
    assert merged.path == Path("/repo")
    assert merged.remote == "upstream"
    assert merged.verbosity == 2
    assert merged.quiet and merged.yes
    assert merged.stale_days == 7
    assert base.stale_days == 30
