"""Tree-sitter parser for Go source files."""
from pathlib import Path
from typing import Optional
from tree_sitter import Language, Parser, Tree
import tree_sitter_go as tsgo


class GoParser:
    """Go parser using the tree-sitter v0.22+ API."""

    SUPPORTED_EXTENSIONS = {'.go'}

    def __init__(self):
        """Initialize parser with the Go grammar."""
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Factory method using the Parser(Language(capsule)) constructor.

        Returns:
            Configured Parser instance
        """
        return Parser(Language(tsgo.language()))

    def parse_source(self, source_code: bytes) -> Tree:
        """Parse in-memory Go source.

        Args:
            source_code: Raw file bytes

        Returns:
            Parsed Tree (may contain ERROR nodes, see has_errors)
        """
        return self.parser.parse(source_code)

    def parse_file(self, file_path: str | Path) -> Optional[Tree]:
        """Parse file and return tree-sitter Tree.

        Args:
            file_path: Path to source file to parse

        Returns:
            Parsed Tree object, or None if the file cannot be read
        """
        file_path = Path(file_path)

        if not file_path.exists():
            return None

        try:
            with open(file_path, 'rb') as f:
                source_code = f.read()
        except OSError:
            return None
        return self.parse_source(source_code)

    @staticmethod
    def has_errors(tree: Tree) -> bool:
        """True when tree-sitter had to recover from a syntax error."""
        return tree.root_node.has_error

    @staticmethod
    def line_count(source_code: bytes) -> int:
        """Count lines the way an editor does: a trailing partial line counts.

        Args:
            source_code: Raw file bytes

        Returns:
            Number of lines (0 for empty input)
        """
        if not source_code:
            return 0
        lines = source_code.count(b'\n')
        if not source_code.endswith(b'\n'):
            lines += 1
        return lines

    @classmethod
    def supports(cls, file_path: str | Path) -> bool:
        """Check whether the file extension is handled (case-sensitive, like `go build`)."""
        return Path(file_path).suffix in cls.SUPPORTED_EXTENSIONS
