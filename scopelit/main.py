"""ScopeLit CLI - find Go string literals that embed in-scope identifiers."""
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from scopelit.analyzer.file_analyzer import analyze_file
from scopelit.analyzer.parser import GoParser
from scopelit.config import __version__, get_config
from scopelit.repo.cloner import CloneError, clone_url_for, ensure_clone, local_dir_for
from scopelit.repo.github_search import GitHubSearchClient, GitHubSearchError
from scopelit.repo.repo_analyzer import RepoReport, RunTotals, analyze_local_repo, gather_go_files
from scopelit.report.writer import write_match_report
from scopelit.utils.logger import RunLog, open_run_log, sanitize_for_terminal
from scopelit.utils.safe_console import SafeConsole

app = typer.Typer(
    name="scopelit",
    help="Flag Go string literals that embed the name of an in-scope identifier",
    add_completion=False
)
console = SafeConsole()


def _version_callback(value: bool):
    if value:
        console.print(f"scopelit {__version__}")
        raise typer.Exit()


def analyze_repository(repo_dir: Path, repo_name: str, parser: GoParser,
                       show_progress: bool = True) -> RepoReport:
    """Analyze a local checkout, optionally with a progress bar."""
    if not show_progress:
        return analyze_local_repo(repo_dir, repo_name, parser)

    total = len(gather_go_files(repo_dir))
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True
    ) as progress:
        task = progress.add_task(f"Analyzing {escape(repo_name)}", total=total)
        return analyze_local_repo(
            repo_dir, repo_name, parser,
            on_file=lambda _result: progress.advance(task)
        )


def log_repo_report(report: RepoReport, run_log: RunLog):
    """Write the per-repository ratios to the run log."""
    run_log.log(
        f"Repository {report.repo_name}: String-to-total-line ratio: {report.line_ratio:.4f} "
        f"({report.string_count} string lines / {report.total_lines} total lines)"
    )
    run_log.log(
        f"Repository {report.repo_name}: Matched-strings-to-total-strings ratio: {report.match_ratio:.4f} "
        f"({report.match_count} matched / {report.string_count} total strings)"
    )


def print_repo_summary(report: RepoReport):
    """Print one repository's counters as a table."""
    table = Table(title=sanitize_for_terminal(f"📦 {escape(report.repo_name)}"))
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Go files", str(report.file_count))
    table.add_row("Skipped files", str(report.skipped_files))
    table.add_row("Total lines", str(report.total_lines))
    table.add_row("String literals", str(report.string_count))
    table.add_row("Matched literals", str(report.match_count))
    table.add_row("Match ratio", f"{report.match_ratio:.4f}")

    console.print(table)


def process_repository(clone_url: str, repo_name: str, work_dir: Path, report_dir: Path,
                       parser: GoParser, run_log: RunLog,
                       show_progress: bool = True) -> Optional[RepoReport]:
    """Clone (if needed), analyze, and report one repository.

    Returns:
        The repository report, or None when the clone failed
    """
    local_dir = local_dir_for(repo_name, work_dir)

    try:
        if ensure_clone(clone_url, local_dir):
            run_log.log(f"Cloned {clone_url} into {local_dir}")
        else:
            run_log.log(f"Directory {str(local_dir)!r} already exists, skipping clone")
    except CloneError as e:
        run_log.log(f"Error cloning {repo_name}: {e}")
        console.print(f"[bold red]✗ Clone failed:[/bold red] {escape(str(e))}")
        return None

    report = analyze_repository(local_dir, repo_name, parser, show_progress=show_progress)
    log_repo_report(report, run_log)
    print_repo_summary(report)

    try:
        report_path = write_match_report(repo_name, report.matches, report_dir)
    except OSError as e:
        run_log.log(f"Error creating report file for {repo_name}: {e}")
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return report

    if report_path is not None:
        run_log.log(f"Wrote {len(report.matches)} matches for {repo_name} to {report_path}")
        console.print(f"[green]✓ Wrote {len(report.matches)} matches to {escape(str(report_path))}[/green]")

    return report


@app.command()
def scan(
    repos: Optional[List[str]] = typer.Argument(None, help="Repositories to analyze, e.g. github.com/user/repo (skips GitHub search)"),
    stars: int = typer.Option(1000, "--stars", help="Minimum number of stars for search"),
    max_stars: int = typer.Option(9000, "--maxstars", help="Maximum number of stars for search"),
    max_results: int = typer.Option(5, "--max", help="Max number of repositories to process (when searching)"),
    work_dir: Optional[Path] = typer.Option(None, "--work-dir", help="Where repositories are cloned (default: SCOPELIT_WORK_DIR or .)"),
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", help="Where *-matches.log files go (default: SCOPELIT_REPORT_DIR or .)"),
    log_file: Path = typer.Option(Path("result.log"), "--log-file", help="Run log destination"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Disable progress bars"),
):
    """Clone and scan GitHub repositories, writing per-repo match reports."""
    config = get_config()
    work_dir = work_dir or config.work_dir
    report_dir = report_dir or config.report_dir

    try:
        run_log = open_run_log(log_file)
    except OSError as e:
        console.print(f"[bold red]Error:[/bold red] cannot create {escape(str(log_file))}: {escape(str(e))}")
        raise typer.Exit(1)

    parser = GoParser()
    totals = RunTotals()

    with run_log:
        if repos:
            run_log.log("Positional arguments detected. Skipping GitHub search.")
            for repo_path in repos:
                run_log.log(f"Analyzing requested GitHub repo: {repo_path}")
                report = process_repository(
                    clone_url_for(repo_path), repo_path, work_dir, report_dir,
                    parser, run_log, show_progress=not no_progress
                )
                if report is not None:
                    totals.add(report)
        else:
            console.print(f"[bold blue]🔍 Searching GitHub:[/bold blue] language:Go stars:{stars}..{max_stars}")
            try:
                with GitHubSearchClient() as client:
                    found = client.search_repositories(stars, max_stars, max_results)
            except GitHubSearchError as e:
                run_log.log(f"Error searching repositories: {e}")
                console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
                raise typer.Exit(1)

            for remote in found:
                run_log.log(f"Scanning repository {remote.full_name} (stars={remote.stargazers_count})")
                report = process_repository(
                    remote.clone_url, remote.full_name, work_dir, report_dir,
                    parser, run_log, show_progress=not no_progress
                )
                if report is not None:
                    totals.add(report)

        run_log.log(
            f"Overall identifier match ratio: {totals.ratio:.4f} "
            f"({totals.match_count} matched / {totals.string_count} total)"
        )

    console.print(
        f"\n[bold yellow]Overall:[/bold yellow] {totals.match_count} matched / "
        f"{totals.string_count} total string literals (ratio {totals.ratio:.4f}) "
        f"across {totals.repo_count} repositories"
    )


@app.command("file")
def scan_path(
    path: Path = typer.Argument(..., help="Go file or directory to analyze"),
    limit: int = typer.Option(50, "--limit", help="Maximum number of matches to show"),
):
    """Analyze a local Go file or directory and print its matches."""
    path = path.resolve()

    if not path.exists():
        console.print(f"[bold red]Error:[/bold red] Path does not exist: {escape(str(path))}")
        raise typer.Exit(1)

    parser = GoParser()
    if path.is_dir():
        report = analyze_local_repo(path, path.name, parser)
    else:
        report = RepoReport(repo_name=path.name)
        report.add(analyze_file(path, parser))

    if report.matches:
        table = Table(title="Literals Embedding In-Scope Identifiers")
        table.add_column("Location", style="magenta", no_wrap=False)
        table.add_column("Identifier", style="cyan")
        table.add_column("Literal", style="yellow", no_wrap=False)

        for match in report.matches[:limit]:
            try:
                display_path = Path(match.file).relative_to(path if path.is_dir() else path.parent)
            except ValueError:
                display_path = match.file
            table.add_row(f"{escape(str(display_path))}:{match.line}",
                          escape(match.identifier), escape(match.literal))

        console.print(table)
        if len(report.matches) > limit:
            console.print(f"[dim]... and {len(report.matches) - limit} more[/dim]")
    else:
        console.print("[bold green]No matching literals found.[/bold green]")

    console.print(f"\n[bold yellow]Summary:[/bold yellow]")
    console.print(f"  Files: {report.file_count} ({report.skipped_files} skipped)")
    console.print(f"  String literals: {report.string_count}")
    console.print(f"  Matched: {report.match_count} (ratio {report.match_ratio:.4f})")


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show version and exit"),
):
    """ScopeLit - flag string literals that embed in-scope identifiers."""
    pass


if __name__ == "__main__":
    app()
