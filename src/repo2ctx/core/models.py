"""
Core data models for repo2ctx.

This module contains the data structures that flow through the context
pipeline: runtime settings, discovered files, scored files, per-group
selections and the results handed to the serializer.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple


DEFAULT_CACHE_DIR = Path.home() / ".repo2ctx-cache"


@dataclass
class Config:
    """Runtime settings for discovery and the builder."""

    # Files larger than this are dropped, never truncated
    max_file_size: int = 100 * 1024

    # Extensions that are never read as text
    binary_extensions: Set[str] = field(default_factory=lambda: {
        # Images
        '.png', '.jpg', '.jpeg', '.gif', '.webp', '.ico', '.svg', '.avif',
        # Fonts
        '.woff', '.woff2', '.ttf', '.otf', '.eot',
        # Documents
        '.pdf',
        # Archives
        '.zip', '.tar', '.gz', '.bz2', '.xz', '.7z', '.rar', '.iso',
        # Audio / video
        '.mp3', '.mp4', '.wav', '.webm', '.ogg',
    })

    # Encoding fallbacks, tried in order
    encoding_fallbacks: List[str] = field(default_factory=lambda: ['utf-8', 'latin-1'])
    binary_sample_size: int = 8192

    # Encoding used for the informational exact token count
    token_encoder: str = "cl100k_base"

    # Threads used to scan groups; allocation is always sequential
    scan_workers: int = 4

    cache_dir: Path = field(default_factory=lambda: Path(
        os.getenv('REPO2CTX_CACHE_DIR', str(DEFAULT_CACHE_DIR))
    ))

    show_progress: bool = False


class Category(str, Enum):
    """Closed set of file categories assigned by the classifier."""

    TYPES = "types"
    EXPORTS = "exports"
    TESTS = "tests"
    EXAMPLES = "examples"
    CONFIG = "config"
    SOURCE = "source"


@dataclass
class CandidateFile:
    """A file that survived discovery, paired with its text content."""

    path: str           # Absolute path on disk
    relative_path: str  # Posix path relative to the scan root
    content: str


@dataclass
class ScoredFile:
    """A candidate file annotated by the classifier."""

    path: str
    relative_path: str
    content: str
    score: int
    category: Category
    tokens: int

    @property
    def extension(self) -> str:
        """Final suffix of the file name, lower-cased."""
        return os.path.splitext(self.relative_path)[1].lower()


@dataclass
class GroupInfo:
    """Identity of one source tree within a run."""

    owner: str
    name: str
    ref: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class Selection:
    """
    Files chosen for one group.

    Always a contiguous prefix of the group's sorted file sequence, with
    ``consumed`` never exceeding ``budget``.
    """

    files: List[ScoredFile] = field(default_factory=list)
    consumed: int = 0
    budget: float = 0

    def __len__(self) -> int:
        return len(self.files)


@dataclass
class GroupResult:
    """A group together with its selection, as handed to the serializer."""

    group: GroupInfo
    selection: Selection
    discovered: int = 0

    @property
    def files(self) -> List[ScoredFile]:
        return self.selection.files

    @property
    def total_tokens(self) -> int:
        return self.selection.consumed

    def stats(self) -> Tuple[int, int, int]:
        """Return (selected, discovered, tokens) for progress reporting."""
        return len(self.selection), self.discovered, self.selection.consumed


@dataclass
class BuildResult:
    """Outcome of one build: the rendered document and its statistics."""

    document: str
    sections: List[GroupResult]
    budget: int

    @property
    def total_files(self) -> int:
        return sum(len(s.selection) for s in self.sections)

    @property
    def total_tokens(self) -> int:
        return sum(s.selection.consumed for s in self.sections)

    def category_breakdown(self) -> Dict[str, int]:
        """Count selected files per category, in first-seen order."""
        counts: Dict[str, int] = {}
        for section in self.sections:
            for f in section.files:
                counts[f.category.value] = counts.get(f.category.value, 0) + 1
        return counts
