"""
Base repository adapter interface.

An adapter turns a repository reference (a local folder or a remote git
URL) into a readable local directory plus the identity shown in the
context document.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.models import Config, GroupInfo


class RepositoryAdapter(ABC):
    """
    Abstract base class for repository adapters.

    The context pipeline only ever sees the directory returned by
    ``resolve()``; fetching and caching stay inside the adapter.
    """

    def __init__(self, config: Config):
        """Initialize adapter with configuration."""
        self.config = config

    @property
    @abstractmethod
    def owner(self) -> str:
        """Owner shown in the group header."""

    @property
    @abstractmethod
    def repo_name(self) -> str:
        """Repository name shown in the group header."""

    @property
    def ref(self) -> Optional[str]:
        """Revision label, if any. Display only."""
        return None

    def get_name(self) -> str:
        """Get the ``owner/name`` label."""
        return f"{self.owner}/{self.repo_name}"

    def group_info(self) -> GroupInfo:
        """Identity of this repository as a group in a build."""
        return GroupInfo(owner=self.owner, name=self.repo_name, ref=self.ref)

    @abstractmethod
    def resolve(self) -> str:
        """
        Make the repository available locally.

        Returns:
            Absolute path of a readable directory.

        Raises:
            SourceError: If the repository cannot be made available.
        """
