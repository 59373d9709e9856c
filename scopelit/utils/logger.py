"""Run logging and terminal-safe output helpers.

Two outputs exist during a scan: the interactive console (see
safe_console.SafeConsole) and the run log, a plain text file that keeps a
timestamped record of every repository processed and the final ratios.
"""
import locale
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from rich.console import Console


# Unicode to ASCII icon mapping for terminals without UTF-8 support.
# Bracketed replacements stay upper-case so Rich markup never parses them as tags.
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '📦': '[REPO]',
    '🔍': '[SEARCH]',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (LookupError, ValueError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding().replace('-', '').replace('_', '') == 'utf8'


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)
    return sanitized


class RunLog:
    """Timestamped plain-text log of a scan run.

    Backed by a Rich Console bound to a file with markup, highlighting and
    wrapping disabled, so every message lands as exactly one line.
    """

    TIME_FORMAT = "%Y/%m/%d %H:%M:%S"

    def __init__(self, stream: TextIO, owns_stream: bool = False):
        """Wrap an open text stream.

        Args:
            stream: Destination for log lines
            owns_stream: Close ``stream`` in close()
        """
        self._stream = stream
        self._owns_stream = owns_stream
        self.console = Console(
            file=stream,
            markup=False,
            highlight=False,
            emoji=False,
            no_color=True,
            soft_wrap=True,
            width=10_000,
        )

    def log(self, message: str):
        """Write one timestamped line."""
        stamp = datetime.now().strftime(self.TIME_FORMAT)
        self.console.print(f"{stamp} {message}")

    def close(self):
        if self._owns_stream:
            self._stream.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def open_run_log(path: Optional[str | Path]) -> RunLog:
    """Create the run log file (truncating any previous run's log).

    Args:
        path: Log file path, or None to log to stderr

    Returns:
        RunLog ready for use as a context manager

    Raises:
        OSError: If the log file cannot be created
    """
    if path is None:
        return RunLog(sys.stderr)
    stream = open(path, 'w', encoding='utf-8')
    return RunLog(stream, owns_stream=True)
