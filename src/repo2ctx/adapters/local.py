"""Local filesystem repository adapter implementation."""
import logging
import os

from ..core.models import Config
from ..exceptions import SourceError
from .base import RepositoryAdapter

logger = logging.getLogger(__name__)


class LocalAdapter(RepositoryAdapter):
    """Adapter for directories already on disk."""

    def __init__(self, repo_path: str, config: Config):
        """Initialize local adapter with repository path."""
        super().__init__(config)
        self.repo_path = os.path.abspath(repo_path)
        self._name = os.path.basename(self.repo_path.rstrip(os.sep)) or self.repo_path

    @property
    def owner(self) -> str:
        return "local"

    @property
    def repo_name(self) -> str:
        return self._name

    def resolve(self) -> str:
        """Return the directory, checking that it exists."""
        if not os.path.isdir(self.repo_path):
            raise SourceError(f"Local path does not exist: {self.repo_path}")
        logger.info(f"Using local path: {self.repo_path}")
        return self.repo_path
