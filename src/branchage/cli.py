"""Command line interface for branchage."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from branchage import __version__
from branchage.config import DEFAULT_PROTECT, DEFAULT_REMOTE, Settings, split_patterns
from branchage.git import BranchKind, BranchRecord, GitError, GitRepo
from branchage.log import build_logger
from branchage.prompt import confirm
from branchage.report import DEFAULT_STALE_DAYS, is_protected, render_age_table, render_stale_summary, select_stale

app = typer.Typer(help="Show how old your git branches are and clean up stale ones")
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True)

PathOption = Annotated[Optional[Path], typer.Option("--path", help="Path to git repository")]
RemoteOption = Annotated[Optional[str], typer.Option("--remote", help="Remote to fetch from")]
VerboseOption = Annotated[int, typer.Option("--verbose", "-v", count=True, help="Log diagnostics to stderr (-vv for more)")]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Do not print branch listings")]
YesOption = Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompts")]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"branchage {__version__}")
        raise typer.Exit()


def fail(err: Exception) -> NoReturn:
    """Report a fatal error and exit."""
    console.print(f"[red]Error:[/red] {escape(str(err))}")
    raise typer.Exit(code=1) from err


@contextmanager
def progress(enabled: bool) -> Iterator[Callable[[str], None]]:
    """Spinner on stderr, updated through the yielded callback."""
    if not enabled:
        yield lambda message: None
        return
    with err_console.status("Starting...", spinner="dots") as status:
        yield status.update


def collect_branches(settings: Settings, log: logging.Logger) -> tuple[GitRepo, list[BranchRecord]]:
    """Open the repository, fetch from the remote and scan branch ages."""
    try:
        repo = GitRepo(settings.path, logger=log)
        log.info("Repository: %s", repo.resolve_name())
        with progress(settings.verbosity == 0 and err_console.is_terminal) as stage:
            stage("Fetching...")
            repo.fetch_remote(settings.remote)
            stage("Scanning branches...")
            records = repo.scan_branches()
    except GitError as err:
        log.error("%s", err)
        fail(err)
    log.info("Scanned %d branches", len(records))
    return repo, records


def run_list(settings: Settings) -> None:
    log = build_logger(settings.verbosity, err_console)
    _, records = collect_branches(settings, log)
    if settings.quiet:
        return

    header, separator, *rows = render_age_table(records)
    console.print(header, style="bold", markup=False)
    console.print(separator, markup=False)
    for row in rows:
        console.print(row, markup=False)


def delete_stale(repo: GitRepo, stale: list[BranchRecord], settings: Settings) -> None:
    """Delete stale branches, skipping protected and checked-out ones."""
    current = repo.get_current_branch_name()
    deleted = []
    for record in stale:
        if record.kind is BranchKind.LOCAL and record.name == current:
            reason = "checked out"
        elif is_protected(record, settings.protect):
            reason = "protected"
        else:
            reason = None

        if reason:
            repo.log.debug("Skipping %s (%s)", record.name, reason)
            if not settings.quiet:
                console.print(f"[yellow]Skipped[/yellow] {escape(record.name)} ({reason})")
            continue

        if repo.delete_branch(record):
            deleted.append(record)
        else:
            console.print(f"[red]Failed to delete[/red] {escape(record.name)}")

    if settings.quiet:
        return
    if deleted:
        console.print(f"[green]Successfully deleted {len(deleted)} branch(es)[/green]")
        for record in deleted:
            console.print(f"  {record.name}", markup=False)
    else:
        console.print("[yellow]No branches were deleted[/yellow]")


def run_clean(settings: Settings) -> None:
    log = build_logger(settings.verbosity, err_console)
    repo, records = collect_branches(settings, log)
    stale = select_stale(records, settings.stale_days)
    log.info("%d of %d branches older than %d days", len(stale), len(records), settings.stale_days)

    if not settings.quiet:
        summary, *lines = render_stale_summary(stale)
        console.print(summary, style="bold", markup=False)
        for line in lines:
            console.print(line, markup=False)

    if not stale:
        return

    if not confirm(f"Delete {len(stale)} stale branches?", default=settings.yes):
        console.print("[yellow]Operation cancelled[/yellow]")
        return

    delete_stale(repo, stale, settings)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    path: Annotated[Path, typer.Option("--path", help="Path to git repository")] = Path("."),
    remote: Annotated[str, typer.Option("--remote", envvar="BRANCHAGE_REMOTE", help="Remote to fetch from")] = DEFAULT_REMOTE,
    verbose: VerboseOption = 0,
    quiet: QuietOption = False,
    yes: YesOption = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit"),
    ] = None,
) -> None:
    """Fetch from the remote and list branches by age (oldest first)."""
    ctx.obj = Settings(path=path, remote=remote, verbosity=verbose, quiet=quiet, yes=yes)
    if ctx.invoked_subcommand is None:
        run_list(ctx.obj)


@app.command("list")
def list_branches(
    ctx: typer.Context,
    path: PathOption = None,
    remote: RemoteOption = None,
    verbose: VerboseOption = 0,
    quiet: QuietOption = False,
    yes: YesOption = False,
) -> None:
    """Fetch from the remote and list branches by age (oldest first)."""
    run_list(ctx.obj.merged(path=path, remote=remote, verbosity=verbose, quiet=quiet, yes=yes))


@app.command()
def clean(
    ctx: typer.Context,
    stale: Annotated[
        int,
        typer.Option("--stale", min=0, envvar="BRANCHAGE_STALE_DAYS", help="Age in days above which a branch is stale"),
    ] = DEFAULT_STALE_DAYS,
    protect: Annotated[
        str,
        typer.Option("--protect", "-p", envvar="BRANCHAGE_PROTECT", help="Comma-separated list of branch patterns to protect"),
    ] = DEFAULT_PROTECT,
    path: PathOption = None,
    remote: RemoteOption = None,
    verbose: VerboseOption = 0,
    quiet: QuietOption = False,
    yes: YesOption = False,
) -> None:
    """Fetch from the remote and delete branches older than --stale days."""
    settings = ctx.obj.merged(
        path=path,
        remote=remote,
        verbosity=verbose,
        quiet=quiet,
        yes=yes,
        stale_days=stale,
        protect=split_patterns(protect),
    )
    run_clean(settings)


if __name__ == "__main__":
    app()
