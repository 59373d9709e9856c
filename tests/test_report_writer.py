"""Tests for match report formatting and writing."""
from scopelit.analyzer.recorder import MatchRecord
from scopelit.report.writer import format_match, quote, report_path_for, write_match_report


def make_match(**overrides):
    fields = dict(
        file='repo/main.go',
        line=12,
        identifier='name',
        literal='name not found',
        entire_line='\treturn errors.New("name not found")',
    )
    fields.update(overrides)
    return MatchRecord(**fields)


class TestQuote:
    """Go-style double quoting."""

    def test_plain(self):
        assert quote('hello') == '"hello"'

    def test_quotes_and_backslashes(self):
        assert quote('say "hi" \\o/') == '"say \\"hi\\" \\\\o/"'

    def test_control_characters(self):
        assert quote('a\tb\n') == '"a\\tb\\n"'
        assert quote('\x00') == '"\\x00"'

    def test_printable_unicode_kept(self):
        assert quote('héllo') == '"héllo"'


class TestFormatMatch:
    """Single report line layout."""

    def test_layout(self):
        line = format_match(make_match())
        assert line == (
            'repo/main.go:12 -> identifier=name; string="name not found"; '
            'entire_line="\\treturn errors.New(\\"name not found\\")"'
        )


class TestWriteMatchReport:
    """Report file creation."""

    def test_report_path_replaces_slashes(self, tmp_path):
        assert report_path_for('github.com/acme/tool', tmp_path) == tmp_path / 'github.com-acme-tool-matches.log'

    def test_no_matches_writes_nothing(self, tmp_path):
        assert write_match_report('acme/tool', [], tmp_path) is None
        assert list(tmp_path.iterdir()) == []

    def test_writes_one_line_per_match(self, tmp_path):
        matches = [make_match(), make_match(line=30, identifier='id', literal='id=%d')]
        path = write_match_report('acme/tool', matches, tmp_path)

        assert path == tmp_path / 'acme-tool-matches.log'
        lines = path.read_text(encoding='utf-8').splitlines()
        assert len(lines) == 2
        assert lines[0].startswith('repo/main.go:12 -> identifier=name; ')
        assert lines[1].startswith('repo/main.go:30 -> identifier=id; string="id=%d"')
