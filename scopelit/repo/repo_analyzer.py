"""Repository-level aggregation of per-file results."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from scopelit.analyzer.file_analyzer import FileResult, analyze_file
from scopelit.analyzer.parser import GoParser
from scopelit.analyzer.recorder import MatchRecord


# Directories never descended into while gathering sources
EXCLUDED_DIRS = {
    '.git', '.hg', '.svn',
    'vendor',
    'node_modules',
    '.idea', '.vscode',
}


@dataclass
class RepoReport:
    """Aggregated counters and matches for one repository."""
    repo_name: str
    file_count: int = 0
    skipped_files: int = 0
    total_lines: int = 0
    string_count: int = 0
    match_count: int = 0
    matches: List[MatchRecord] = field(default_factory=list)

    def add(self, result: FileResult):
        """Fold one file's result into the repository totals."""
        self.file_count += 1
        if result.skipped:
            self.skipped_files += 1
        self.total_lines += result.total_lines
        self.string_count += result.string_count
        self.match_count += result.match_count
        self.matches.extend(result.matches)

    @property
    def line_ratio(self) -> float:
        """String literals per source line."""
        if self.total_lines == 0:
            return 0.0
        return self.string_count / self.total_lines

    @property
    def match_ratio(self) -> float:
        """Matched literals over all literals."""
        if self.string_count == 0:
            return 0.0
        return self.match_count / self.string_count


@dataclass
class RunTotals:
    """Run-wide totals, summed from independent repository reports."""
    string_count: int = 0
    match_count: int = 0
    repo_count: int = 0

    def add(self, report: RepoReport):
        self.repo_count += 1
        self.string_count += report.string_count
        self.match_count += report.match_count

    @property
    def ratio(self) -> float:
        if self.string_count == 0:
            return 0.0
        return self.match_count / self.string_count


def gather_go_files(root: str | Path) -> List[Path]:
    """Recursively collect ``.go`` files under root.

    Args:
        root: Directory to search

    Returns:
        Sorted list of Go source paths (VCS and vendor trees excluded)
    """
    root = Path(root)
    go_files = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk skips excluded trees entirely
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
        for filename in filenames:
            if GoParser.supports(filename):
                go_files.append(Path(dirpath) / filename)
    return sorted(go_files)


def analyze_local_repo(repo_dir: str | Path, repo_name: str,
                       parser: Optional[GoParser] = None,
                       on_file: Optional[Callable[[FileResult], None]] = None) -> RepoReport:
    """Analyze every Go file in a local checkout.

    Args:
        repo_dir: Repository root on disk
        repo_name: Display name stored on the report (e.g. ``owner/repo``)
        parser: Reusable parser (one is created if omitted)
        on_file: Optional callback invoked after each file (progress bars)

    Returns:
        RepoReport with totals and matches in file order
    """
    parser = parser or GoParser()
    report = RepoReport(repo_name=repo_name)

    for file_path in gather_go_files(repo_dir):
        result = analyze_file(file_path, parser)
        report.add(result)
        if on_file is not None:
            on_file(result)

    return report
