"""
File discovery for the context pipeline.

Walks a source tree, applies include patterns (or a path restriction) minus
the built-in and caller-supplied exclusions, and reads every surviving file
as text. Files that cannot be read are dropped individually; discovery as a
whole only fails on configuration errors.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from tqdm import tqdm

from .file_analyzer import FileAnalyzer
from .models import CandidateFile, Config
from ..exceptions import ConfigError
from ..utils.path_utils import PathUtils, excludes_directory, match_any

logger = logging.getLogger(__name__)


DEFAULT_INCLUDE = [
    "**/*.ts",
    "**/*.tsx",
    "**/*.js",
    "**/*.jsx",
    "**/*.svelte",
    "**/*.vue",
    "**/*.json",
    "**/*.md",
]

DEFAULT_EXCLUDE = [
    # Dependencies and build output
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.next/**",
    "**/.svelte-kit/**",
    "**/coverage/**",
    # Version control
    "**/.git/**",
    # Lockfiles
    "**/*.lock",
    "**/package-lock.json",
    "**/yarn.lock",
    "**/pnpm-lock.yaml",
    # Minified and sourcemaps
    "**/*.min.js",
    "**/*.map",
    "**/*.d.ts.map",
    # Project meta
    "**/CHANGELOG.md",
    "**/LICENSE*",
    "**/.DS_Store",
    # Editors
    "**/.idea/**",
    "**/.vscode/**",
    # Internals, fixtures and mocks
    "**/internal/**",
    "**/_internal/**",
    "**/__fixtures__/**",
    "**/__mocks__/**",
]

TEST_EXCLUDE = [
    "**/*.test.*",
    "**/*.spec.*",
    "**/__tests__/**",
]


@dataclass
class FilterOptions:
    """Per-group discovery options."""

    paths: Optional[List[str]] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    include_tests: bool = True

    def restricted_paths(self) -> List[str]:
        """
        Normalize and check the path restriction.

        Returns:
            Posix paths relative to the root; ``''`` stands for the root.

        Raises:
            ConfigError: If a restricted path is empty, absolute or escapes
                the root through ``..``.
        """
        restriction = []
        for raw in self.paths or []:
            if not raw or not raw.strip():
                raise ConfigError("Empty path in path restriction")
            normalized = PathUtils.normalize_path(raw.strip())
            if normalized.startswith('/') or (len(normalized) > 1 and normalized[1] == ':'):
                raise ConfigError(f"Path restriction must be relative: {raw}")
            parts = PathUtils.normalize_and_split(normalized)
            if '..' in parts:
                raise ConfigError(f"Path restriction may not leave the repository: {raw}")
            restriction.append(PathUtils.join_path_components(parts))
        return restriction

    def include_patterns(self) -> List[str]:
        """Resolve the include patterns: restriction, explicit list, or defaults."""
        if self.paths:
            return [f"{p}/**/*" if p else "**/*" for p in self.restricted_paths()]
        if self.include:
            return list(self.include)
        return list(DEFAULT_INCLUDE)

    def exclude_patterns(self) -> List[str]:
        """Built-in exclusions plus caller excludes plus test exclusion."""
        patterns = list(DEFAULT_EXCLUDE)
        patterns.extend(self.exclude or [])
        if not self.include_tests:
            patterns.extend(TEST_EXCLUDE)
        return patterns


class FileDiscovery:
    """Enumerates and reads candidate files under a root directory."""

    def __init__(self, config: Config):
        self.config = config
        self.file_analyzer = FileAnalyzer(config)

    def list_paths(self, root: str, options: FilterOptions) -> List[str]:
        """
        List relative paths that pass include and exclude patterns.

        Directories and files are visited in sorted name order so that the
        listing is stable across platforms.
        """
        includes = options.include_patterns()
        excludes = options.exclude_patterns()

        if options.paths:
            starts = [os.path.join(root, *p.split('/')) if p else root
                      for p in options.restricted_paths()]
        else:
            starts = [root]

        seen = set()
        results = []
        for start in starts:
            if not os.path.isdir(start):
                logger.debug(f"Restricted path not found: {start}")
                continue
            for current, dirs, files in os.walk(start, followlinks=False):
                rel_dir = PathUtils.normalize_path(os.path.relpath(current, root))
                rel_dir = '' if rel_dir == '.' else rel_dir

                kept_dirs = []
                for d in sorted(dirs):
                    rel = f"{rel_dir}/{d}" if rel_dir else d
                    if os.path.islink(os.path.join(current, d)):
                        continue
                    if excludes_directory(rel, excludes):
                        continue
                    kept_dirs.append(d)
                dirs[:] = kept_dirs

                for name in sorted(files):
                    rel = f"{rel_dir}/{name}" if rel_dir else name
                    if rel in seen:
                        continue
                    if os.path.islink(os.path.join(current, name)):
                        continue
                    if not match_any(rel, includes):
                        continue
                    if match_any(rel, excludes, dot=True):
                        continue
                    seen.add(rel)
                    results.append(rel)
        return results

    def discover(self, root: str, options: Optional[FilterOptions] = None) -> List[CandidateFile]:
        """
        Discover candidate files under ``root``.

        Args:
            root: Resolved local directory of the source tree.
            options: Include/exclude options; defaults apply when None.

        Returns:
            Candidate files in walk order, each with its text content.

        Raises:
            ConfigError: If ``root`` is not a directory or the path
                restriction is malformed.
        """
        options = options or FilterOptions()
        if not os.path.isdir(root):
            raise ConfigError(f"Path is not a directory: {root}")
        options.restricted_paths()

        root = os.path.abspath(root)
        rel_paths = self.list_paths(root, options)

        candidates = []
        for rel in tqdm(rel_paths, desc="Reading files", unit="file",
                        leave=False, disable=not self.config.show_progress):
            if self.file_analyzer.has_binary_extension(rel):
                continue
            full_path = os.path.join(root, *rel.split('/'))
            content, error = self.file_analyzer.read_file_content(full_path)
            if content is None:
                logger.debug(f"Skipping {rel}: {error}")
                continue
            candidates.append(CandidateFile(path=full_path, relative_path=rel, content=content))

        logger.debug(f"Discovered {len(candidates)} of {len(rel_paths)} matched files in {root}")
        return candidates


def discover_files(root: str, options: Optional[FilterOptions] = None,
                   config: Optional[Config] = None) -> List[CandidateFile]:
    """Convenience wrapper around ``FileDiscovery.discover``."""
    return FileDiscovery(config or Config()).discover(root, options)
