"""Match records and per-file counters."""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .matcher import contains_identifier


@dataclass(frozen=True)
class StringLiteral:
    """A string literal as seen by the walker (delimiters stripped)."""
    text: str
    line: int  # 1-based
    file_path: str


@dataclass(frozen=True)
class MatchRecord:
    """One string literal that embeds an in-scope identifier."""
    file: str
    line: int
    identifier: str
    literal: str
    entire_line: str  # raw source line, report context only


@dataclass
class FileStats:
    """Counters and matches produced by walking one file."""
    string_count: int = 0
    match_count: int = 0
    matches: List[MatchRecord] = field(default_factory=list)


class MatchRecorder:
    """Tests literals against visible names and accumulates results."""

    def __init__(self, file_path: str, source_lines: Sequence[str]):
        """Initialize recorder for one file.

        Args:
            file_path: Path stored in every MatchRecord
            source_lines: Raw source split into lines (index 0 = line 1)
        """
        self.file_path = file_path
        self.source_lines = source_lines
        self.stats = FileStats()

    def observe(self, literal: StringLiteral, visible_names: Iterable[str]) -> Optional[MatchRecord]:
        """Count one literal and record it if any visible name occurs in it.

        Names are tried in the given order and the first hit wins, so a
        literal is matched (and counted as matched) at most once.

        Args:
            literal: The literal being visited
            visible_names: Names in scope, in tie-break order

        Returns:
            The new MatchRecord, or None when nothing matched
        """
        self.stats.string_count += 1

        for name in visible_names:
            if contains_identifier(literal.text, name):
                record = MatchRecord(
                    file=literal.file_path,
                    line=literal.line,
                    identifier=name,
                    literal=literal.text,
                    entire_line=self._line_at(literal.line),
                )
                self.stats.matches.append(record)
                self.stats.match_count += 1
                return record
        return None

    def _line_at(self, line: int) -> str:
        if 1 <= line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return ""
