"""Configuration management for ScopeLit.

Loads environment variables and provides centralized config access.
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

__version__ = "0.3.0"


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: Optional[Path] = None):
        """Initialize config by loading .env file.

        Args:
            env_path: Explicit .env location (defaults to the project root)
        """
        if env_path is None:
            env_path = Path(__file__).parent.parent / ".env"
        load_dotenv(env_path)

    @property
    def github_token(self) -> Optional[str]:
        """Get GitHub API token from environment.

        Returns:
            Token string, or None for unauthenticated requests
        """
        return os.getenv("GITHUB_TOKEN") or None

    @property
    def github_api_url(self) -> str:
        """Get GitHub REST API base URL with fallback."""
        return os.getenv("SCOPELIT_GITHUB_API", "https://api.github.com").rstrip("/")

    @property
    def work_dir(self) -> Path:
        """Directory that receives repository clones."""
        return Path(os.getenv("SCOPELIT_WORK_DIR", "."))

    @property
    def report_dir(self) -> Path:
        """Directory that receives ``*-matches.log`` reports."""
        return Path(os.getenv("SCOPELIT_REPORT_DIR", "."))

    @property
    def request_timeout(self) -> float:
        """HTTP timeout in seconds for GitHub API calls.

        Returns:
            Timeout from SCOPELIT_HTTP_TIMEOUT, or 30 seconds if unset/invalid
        """
        raw = os.getenv("SCOPELIT_HTTP_TIMEOUT", "30")
        try:
            return float(raw)
        except ValueError:
            return 30.0


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
