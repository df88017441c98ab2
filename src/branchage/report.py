"""Branch age reporting and stale branch selection."""

from collections.abc import Iterable, Sequence
from fnmatch import fnmatch

from branchage.git import BranchKind, BranchRecord

MIN_NAME_WIDTH = 10
AGE_WIDTH = 10
DEFAULT_STALE_DAYS = 30


def sort_by_age(records: Iterable[BranchRecord]) -> list[BranchRecord]:
    """Oldest first. Branches of equal age keep their scan order."""
    return sorted(records, key=lambda record: record.age_days, reverse=True)


def name_width(records: Sequence[BranchRecord]) -> int:
    """Width of the branch name column."""
    return max([MIN_NAME_WIDTH, *(len(record.name) for record in records)])


def render_age_table(records: Sequence[BranchRecord]) -> list[str]:
    """Lines of the branch age table, oldest branch first."""
    ordered = sort_by_age(records)
    width = name_width(ordered)
    lines = [
        f"{'Branch':<{width}}  Age (days)",
        f"{'':-<{width}}  {'':-<{AGE_WIDTH}}",
    ]
    lines.extend(f"{record.name:<{width}}  {record.age_days:>{AGE_WIDTH}}" for record in ordered)
    return lines


def select_stale(records: Iterable[BranchRecord], threshold: int = DEFAULT_STALE_DAYS) -> list[BranchRecord]:
    """Branches strictly older than ``threshold`` days, oldest first."""
    return [record for record in sort_by_age(records) if record.age_days > threshold]


def render_stale_summary(stale: Sequence[BranchRecord]) -> list[str]:
    """Count line followed by one ``name  <age>d`` line per stale branch."""
    width = name_width(stale)
    lines = [f"Found {len(stale)} stale branches."]
    lines.extend(f"{record.name:<{width}}  {record.age_days}d" for record in stale)
    return lines


def is_protected(record: BranchRecord, patterns: Iterable[str]) -> bool:
    """Check a branch against protection patterns.

    For remote-tracking branches the pattern is also tried against the name
    without the remote prefix, so ``main`` protects ``origin/main`` too.
    """
    names = [record.name]
    if record.kind is BranchKind.REMOTE and "/" in record.name:
        names.append(record.name.split("/", 1)[1])
    return any(fnmatch(name, pattern) for pattern in patterns if pattern for name in names)
