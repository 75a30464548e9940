"""Repository adapters for different source types."""
import re
from typing import NamedTuple, Optional

from ..core.models import Config
from ..exceptions import ConfigError
from .base import RepositoryAdapter
from .git import GitAdapter, RepoCache
from .local import LocalAdapter


class RepoRef(NamedTuple):
    """A parsed ``owner/name`` repository reference."""

    owner: str
    name: str
    url: str


def parse_repo_url(repo_input: str) -> RepoRef:
    """
    Parse a GitHub URL or ``owner/repo`` shorthand.

    Args:
        repo_input: e.g. ``https://github.com/owner/repo.git`` or ``owner/repo``

    Returns:
        RepoRef with the canonical clone URL.

    Raises:
        ConfigError: If the input does not name an owner and a repository.
    """
    cleaned = re.sub(r'^https?://', '', repo_input.strip())
    cleaned = re.sub(r'^github\.com/', '', cleaned)
    cleaned = re.sub(r'\.git$', '', cleaned)

    parts = cleaned.split('/')
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ConfigError(f"Invalid repository URL: {repo_input}. Use owner/repo format.")

    owner, name = parts[0], parts[1]
    return RepoRef(owner=owner, name=name, url=f"https://github.com/{owner}/{name}.git")


def create_adapter(repo_url_or_path: str, config: Config, ref: Optional[str] = None,
                   local: bool = False) -> RepositoryAdapter:
    """
    Create appropriate repository adapter based on input.

    Args:
        repo_url_or_path: GitHub URL, ``owner/repo`` shorthand, or local path
        config: Configuration object
        ref: Optional git ref to check out (remote repositories only)
        local: Treat the input as a local directory path

    Returns:
        Appropriate RepositoryAdapter instance

    Raises:
        ConfigError: If a remote reference cannot be parsed
    """
    if local:
        return LocalAdapter(repo_url_or_path, config)

    parsed = parse_repo_url(repo_url_or_path)
    return GitAdapter(parsed.url, parsed.owner, parsed.name, config,
                      ref=ref, cache=RepoCache(config.cache_dir))


__all__ = [
    'RepositoryAdapter',
    'GitAdapter',
    'LocalAdapter',
    'RepoCache',
    'RepoRef',
    'create_adapter',
    'parse_repo_url',
]
