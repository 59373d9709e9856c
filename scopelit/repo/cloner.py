"""Shallow git clones of remote repositories."""
import subprocess
from pathlib import Path


class CloneError(RuntimeError):
    """Raised when ``git clone`` fails or git is unavailable."""


def clone_url_for(repo_path: str) -> str:
    """Build an HTTPS clone URL from a path like ``github.com/user/repo``.

    Args:
        repo_path: Host-qualified repository path, with or without ``.git``

    Returns:
        URL such as ``https://github.com/user/repo.git``
    """
    return "https://" + repo_path.removesuffix(".git") + ".git"


def local_dir_for(repo_name: str, work_dir: str | Path = ".") -> Path:
    """Directory used for a repository clone: ``repo-<name with / as ->``."""
    return Path(work_dir) / ("repo-" + repo_name.replace("/", "-"))


def clone_repo(git_url: str, dest: str | Path, timeout: float | None = None):
    """Shallow-clone ``git_url`` into ``dest``.

    Args:
        git_url: Remote URL
        dest: Target directory (must not exist)
        timeout: Optional limit in seconds for the git process

    Raises:
        CloneError: If git exits non-zero, times out or cannot be started
    """
    command = ["git", "clone", "--depth=1", git_url, str(dest)]
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise CloneError(f"git clone {git_url} failed: {e}") from e

    if result.returncode != 0:
        detail = result.stderr.strip().splitlines()[-1:] or ["no output"]
        raise CloneError(f"git clone {git_url} exited {result.returncode}: {detail[0]}")


def ensure_clone(git_url: str, dest: str | Path, timeout: float | None = None) -> bool:
    """Clone unless ``dest`` already exists.

    Returns:
        True if a clone was made, False if ``dest`` was already present

    Raises:
        CloneError: If a fresh clone was needed and failed
    """
    dest = Path(dest)
    if dest.exists():
        return False
    clone_repo(git_url, dest, timeout=timeout)
    return True
