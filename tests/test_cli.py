"""End-to-end tests for the scopelit CLI (no network, no git)."""
import io
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from scopelit import main as cli
from scopelit.config import __version__
from scopelit.repo.github_search import GitHubSearchError, RemoteRepo
from scopelit.repo.repo_analyzer import RepoReport
from scopelit.utils import logger


FIXTURES_DIR = Path(__file__).parent / 'fixtures' / 'go'

GO_SOURCE = """package widget

func Build(size int) string {
\treturn "size too large"
}

func Other() string {
\treturn "plain"
}
"""

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path):
    """Work dir with an already-cloned repository for github.com/acme/widget."""
    repo_dir = tmp_path / 'repo-github.com-acme-widget'
    repo_dir.mkdir()
    (repo_dir / 'widget.go').write_text(GO_SOURCE, encoding='utf-8')
    return tmp_path


def scan_args(workspace, *extra):
    return [
        'scan', *extra,
        '--work-dir', str(workspace),
        '--report-dir', str(workspace),
        '--log-file', str(workspace / 'result.log'),
        '--no-progress',
    ]


class TestScanCommand:
    """scan with positional repositories and with GitHub search."""

    def test_positional_repo_skips_search(self, workspace, monkeypatch):
        def no_search(*args, **kwargs):
            raise AssertionError('search must not run when repos are given')

        monkeypatch.setattr(cli, 'GitHubSearchClient', no_search)
        result = runner.invoke(cli.app, scan_args(workspace, 'github.com/acme/widget'))

        assert result.exit_code == 0, result.output
        log = (workspace / 'result.log').read_text(encoding='utf-8')
        assert 'Positional arguments detected. Skipping GitHub search.' in log
        assert 'already exists, skipping clone' in log
        assert 'Matched-strings-to-total-strings ratio: 0.5000 (1 matched / 2 total strings)' in log
        assert 'Overall identifier match ratio: 0.5000 (1 matched / 2 total)' in log

        report = workspace / 'github.com-acme-widget-matches.log'
        lines = report.read_text(encoding='utf-8').splitlines()
        assert len(lines) == 1
        assert ':4 -> identifier=size; string="size too large"' in lines[0]

    def test_search_drives_scan(self, workspace, monkeypatch):
        (workspace / 'repo-acme-widget').mkdir()
        (workspace / 'repo-acme-widget' / 'widget.go').write_text(GO_SOURCE, encoding='utf-8')
        requested = []

        class FakeClient:
            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                pass

            def search_repositories(self, min_stars, max_stars, max_results):
                requested.append((min_stars, max_stars, max_results))
                return [RemoteRepo('acme/widget', 'https://github.com/acme/widget.git', 4200)]

        monkeypatch.setattr(cli, 'GitHubSearchClient', FakeClient)
        result = runner.invoke(cli.app, scan_args(workspace, '--stars', '10', '--maxstars', '20', '--max', '3'))

        assert result.exit_code == 0, result.output
        assert requested == [(10, 20, 3)]
        log = (workspace / 'result.log').read_text(encoding='utf-8')
        assert 'Scanning repository acme/widget (stars=4200)' in log
        assert (workspace / 'acme-widget-matches.log').exists()

    def test_search_failure_exits_nonzero(self, workspace, monkeypatch):
        class FailingClient:
            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                pass

            def search_repositories(self, *args):
                raise GitHubSearchError('GitHub search failed: HTTP 401')

        monkeypatch.setattr(cli, 'GitHubSearchClient', FailingClient)
        result = runner.invoke(cli.app, scan_args(workspace))

        assert result.exit_code == 1
        log = (workspace / 'result.log').read_text(encoding='utf-8')
        assert 'Error searching repositories' in log

    def test_clone_failure_continues(self, workspace, monkeypatch):
        from scopelit.repo.cloner import CloneError

        def failing_clone(url, dest, timeout=None):
            raise CloneError(f'git clone {url} exited 128')

        monkeypatch.setattr(cli, 'ensure_clone', failing_clone)
        result = runner.invoke(cli.app, scan_args(workspace, 'github.com/acme/missing'))

        assert result.exit_code == 0, result.output
        log = (workspace / 'result.log').read_text(encoding='utf-8')
        assert 'Error cloning github.com/acme/missing' in log
        assert 'Overall identifier match ratio: 0.0000 (0 matched / 0 total)' in log


class TestFileCommand:
    """file: local analysis with a Rich table."""

    def test_directory(self):
        result = runner.invoke(cli.app, ['file', str(FIXTURES_DIR)])
        assert result.exit_code == 0, result.output
        assert 'String literals: 12' in result.output
        assert 'Matched: 4' in result.output

    def test_single_file_without_matches(self):
        result = runner.invoke(cli.app, ['file', str(FIXTURES_DIR / 'util.go')])
        assert result.exit_code == 0, result.output
        assert 'No matching literals found.' in result.output

    def test_missing_path(self, tmp_path):
        result = runner.invoke(cli.app, ['file', str(tmp_path / 'nope')])
        assert result.exit_code == 1


class TestRepoSummary:
    """Per-repository summary table."""

    def test_title_sanitized_on_ascii_terminal(self, monkeypatch):
        buffer = io.StringIO()
        monkeypatch.setattr(logger, 'is_utf8_capable', lambda: False)
        monkeypatch.setattr(cli, 'console', Console(file=buffer, width=80, color_system=None))

        cli.print_repo_summary(RepoReport(repo_name='acme/widget'))

        output = buffer.getvalue()
        assert '[REPO] acme/widget' in output
        assert '\U0001f4e6' not in output


def test_version():
    result = runner.invoke(cli.app, ['--version'])
    assert result.exit_code == 0
    assert __version__ in result.output
