"""Plain-text match reports (``<repo>-matches.log``)."""
from pathlib import Path
from typing import Iterable, Optional, Sequence

from scopelit.analyzer.recorder import MatchRecord

_SIMPLE_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\a': '\\a',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\v': '\\v',
}


def quote(text: str) -> str:
    """Double-quote ``text`` with Go-style escapes.

    Printable characters pass through; control and other non-printable
    characters become ``\\xNN``, ``\\uNNNN`` or ``\\UNNNNNNNN``.
    """
    out = ['"']
    for char in text:
        if char in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[char])
        elif char.isprintable():
            out.append(char)
        else:
            code = ord(char)
            if code < 0x80:
                out.append(f'\\x{code:02x}')
            elif code <= 0xFFFF:
                out.append(f'\\u{code:04x}')
            else:
                out.append(f'\\U{code:08x}')
    out.append('"')
    return ''.join(out)


def format_match(match: MatchRecord) -> str:
    """Render one match as a single report line (no trailing newline)."""
    return (
        f"{match.file}:{match.line} -> identifier={match.identifier}; "
        f"string={quote(match.literal)}; entire_line={quote(match.entire_line)}"
    )


def report_path_for(repo_name: str, out_dir: str | Path = ".") -> Path:
    """Report file for a repository: slashes in the name become dashes."""
    return Path(out_dir) / (repo_name.replace("/", "-") + "-matches.log")


def write_match_report(repo_name: str, matches: Sequence[MatchRecord],
                       out_dir: str | Path = ".") -> Optional[Path]:
    """Write every match to the repository's report file.

    Args:
        repo_name: Repository display name
        matches: Matches in the order they were found
        out_dir: Directory for the report

    Returns:
        Path written, or None when there were no matches (nothing is written)

    Raises:
        OSError: If the report cannot be created
    """
    if not matches:
        return None

    report_path = report_path_for(repo_name, out_dir)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w', encoding='utf-8') as f:
        f.writelines(_lines(matches))
    return report_path


def _lines(matches: Iterable[MatchRecord]):
    for match in matches:
        yield format_match(match) + "\n"
