"""Per-file analysis: read, parse, walk."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .parser import GoParser
from .recorder import MatchRecord
from .walker import ScopeWalker


@dataclass
class FileResult:
    """Outcome of analyzing one Go file."""
    file_path: str
    total_lines: int = 0
    string_count: int = 0
    match_count: int = 0
    matches: List[MatchRecord] = field(default_factory=list)
    skipped: bool = False  # unreadable, empty or unparseable


def split_source_lines(source_code: bytes) -> List[str]:
    """Split raw source into lines numbered the way tree-sitter numbers rows.

    Only '\\n' ends a line (a trailing '\\r' is dropped), so ``lines[line - 1]``
    is always the line a node starts on.

    Args:
        source_code: Raw file bytes

    Returns:
        Lines in file order; undecodable bytes are replaced
    """
    text = source_code.decode('utf-8', errors='replace')
    return [line.rstrip('\r') for line in text.split('\n')]


def analyze_source(source_code: bytes, file_path: str,
                   parser: Optional[GoParser] = None) -> FileResult:
    """Analyze in-memory Go source.

    Args:
        source_code: Raw file bytes
        file_path: Path recorded in matches
        parser: Reusable parser (a new one is created if omitted)

    Returns:
        FileResult; ``skipped`` is set for empty or syntactically invalid input
    """
    result = FileResult(file_path=file_path)
    if not source_code:
        result.skipped = True
        return result

    parser = parser or GoParser()
    tree = parser.parse_source(source_code)
    if parser.has_errors(tree):
        result.skipped = True
        return result

    source_lines = split_source_lines(source_code)
    walker = ScopeWalker(file_path, source_lines)
    stats = walker.walk(tree)

    result.total_lines = parser.line_count(source_code)
    result.string_count = stats.string_count
    result.match_count = stats.match_count
    result.matches = stats.matches
    return result


def analyze_file(file_path: str | Path, parser: Optional[GoParser] = None) -> FileResult:
    """Analyze one Go file on disk.

    Unreadable files produce an empty, skipped result rather than an error
    so that a single bad file never stops a repository scan.

    Args:
        file_path: Go source file
        parser: Reusable parser (a new one is created if omitted)

    Returns:
        FileResult for the file
    """
    try:
        source_code = Path(file_path).read_bytes()
    except OSError:
        return FileResult(file_path=str(file_path), skipped=True)
    return analyze_source(source_code, str(file_path), parser)
