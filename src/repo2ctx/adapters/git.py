"""Remote git repository adapter with a local checkout cache."""
import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional

from ..core.models import Config
from ..exceptions import SourceError
from .base import RepositoryAdapter

logger = logging.getLogger(__name__)


class RepoCache:
    """
    Location of cached checkouts.

    The directory is created on first use and never cleaned up
    automatically. Each repository lives at ``<root>/<owner>--<name>``.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def path_for(self, owner: str, name: str) -> Path:
        return self.root / f"{owner}--{name}"


class GitAdapter(RepositoryAdapter):
    """Adapter that clones (or updates) a git repository into the cache."""

    def __init__(self, url: str, owner: str, name: str, config: Config,
                 ref: Optional[str] = None, cache: Optional[RepoCache] = None):
        super().__init__(config)
        self.url = url
        self._owner = owner
        self._name = name
        self._ref = ref
        self.cache = cache or RepoCache(config.cache_dir)

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repo_name(self) -> str:
        return self._name

    @property
    def ref(self) -> Optional[str]:
        return self._ref

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> str:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(cwd) if cwd else None,
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout

    def resolve(self) -> str:
        """
        Clone the repository, or update the cached checkout.

        Update failures fall back to the cached copy; clone failures raise.
        """
        self.cache.ensure()
        repo_path = self.cache.path_for(self.owner, self.repo_name)

        if repo_path.exists():
            self._update(repo_path)
        else:
            self._clone(repo_path)
        return str(repo_path)

    def _update(self, repo_path: Path) -> None:
        logger.info(f"Updating {self.get_name()}...")
        try:
            self._git(["fetch", "--all"], cwd=repo_path)
            if self.ref:
                self._git(["checkout", self.ref], cwd=repo_path)
                self._git(["pull", "--rebase", "origin", self.ref], cwd=repo_path)
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning(f"Could not update {self.get_name()}, using cached version: {e}")

    def _clone(self, repo_path: Path) -> None:
        logger.info(f"Cloning {self.get_name()}...")
        try:
            self._git(["clone", "--depth=1", self.url, str(repo_path)])
            if self.ref:
                self._git(["fetch", "origin", self.ref, "--depth=1"], cwd=repo_path)
                self._git(["checkout", self.ref], cwd=repo_path)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip()
            raise SourceError(f"Failed to clone {self.url}: {detail or e}") from e
        except OSError as e:
            raise SourceError(f"Failed to run git: {e}") from e
