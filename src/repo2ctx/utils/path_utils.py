"""Path normalization and glob matching utilities."""

from fnmatch import fnmatchcase
from typing import Iterable, List


class PathUtils:
    """Utilities for consistent path handling across platforms."""

    @staticmethod
    def normalize_path(path: str) -> str:
        """
        Normalize path separators to forward slashes.

        Args:
            path: File path with potentially mixed separators

        Returns:
            Path with forward slashes only
        """
        return path.replace('\\\\', '/').replace('\\', '/')

    @staticmethod
    def normalize_and_split(path: str) -> List[str]:
        """
        Normalize path and split into non-empty components.

        Leading ``./`` components are dropped.
        """
        return [p for p in PathUtils.normalize_path(path).split('/') if p and p != '.']

    @staticmethod
    def join_path_components(components: List[str]) -> str:
        """Join path components with forward slashes."""
        return '/'.join(components)


def expand_braces(pattern: str) -> List[str]:
    """
    Expand ``{a,b}`` alternatives into separate patterns.

    Groups may nest. Braces without a top-level comma stay literal, as does
    an unclosed brace.

    >>> expand_braces('src/*.{ts,tsx}')
    ['src/*.ts', 'src/*.tsx']
    """
    depth = 0
    start = 0
    commas: List[int] = []
    for i, ch in enumerate(pattern):
        if ch == '{':
            if depth == 0:
                start, commas = i, []
            depth += 1
        elif ch == ',' and depth == 1:
            commas.append(i)
        elif ch == '}' and depth:
            depth -= 1
            if depth == 0 and commas:
                head, tail = pattern[:start], pattern[i + 1:]
                bounds = [start] + commas + [i]
                expanded: List[str] = []
                for lo, hi in zip(bounds, bounds[1:]):
                    expanded.extend(expand_braces(head + pattern[lo + 1:hi] + tail))
                return list(dict.fromkeys(expanded))
    return [pattern]


def _match_parts(parts: List[str], pats: List[str], dot: bool) -> bool:
    if not pats:
        return not parts

    head = pats[0]
    if head == '**':
        if _match_parts(parts, pats[1:], dot):
            return True
        if parts and (dot or not parts[0].startswith('.')):
            return _match_parts(parts[1:], pats, dot)
        return False

    if not parts:
        return False

    name = parts[0]
    if not dot and name.startswith('.') and not head.startswith('.'):
        return False
    if not fnmatchcase(name, head):
        return False
    return _match_parts(parts[1:], pats[1:], dot)


def glob_match(rel_path: str, pattern: str, dot: bool = False) -> bool:
    """
    Match a relative path against a glob pattern.

    ``**`` matches zero or more whole path segments; ``*``, ``?`` and
    ``[...]`` match inside a single segment, and ``{a,b}`` alternatives are
    expanded first. With ``dot`` False, wildcards do
    not match names starting with a dot unless the pattern segment itself
    starts with one.

    Args:
        rel_path: Path relative to the scan root, any separator style.
        pattern: Glob pattern using forward slashes.
        dot: Whether wildcards may match dot-prefixed names.

    Returns:
        True if the whole path matches the pattern.
    """
    parts = PathUtils.normalize_and_split(rel_path)
    return any(_match_parts(parts, PathUtils.normalize_and_split(alt), dot)
               for alt in expand_braces(pattern))


def match_any(rel_path: str, patterns: Iterable[str], dot: bool = False) -> bool:
    """Return True if ``rel_path`` matches at least one pattern."""
    return any(glob_match(rel_path, p, dot=dot) for p in patterns)


def excludes_directory(dir_path: str, patterns: Iterable[str]) -> bool:
    """
    Check whether a directory is excluded wholesale.

    Only patterns of the form ``<prefix>/**`` can exclude a directory; the
    directory is excluded when it matches ``<prefix>``.
    """
    for pattern in patterns:
        for alt in expand_braces(pattern):
            if alt.endswith('/**') and glob_match(dir_path, alt[:-3], dot=True):
                return True
    return False
