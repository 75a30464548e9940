"""
Priority classification of discovered files.

A file's score and category come from the first matching rule in ``RULES``.
Rules are evaluated top to bottom; matches are never combined and a file is
never re-evaluated. Scores only rank files within a run.
"""

import posixpath
from typing import Callable, Iterable, List, NamedTuple, Tuple

from .models import CandidateFile, Category, ScoredFile
from .tokenizer import estimate_tokens


SOURCE_EXTENSIONS = {'.ts', '.tsx', '.js', '.jsx', '.vue', '.svelte', '.ripple', '.html'}
CONFIG_EXTENSIONS = {'.json', '.yaml', '.yml', '.toml'}
ENTRY_POINT_NAMES = {'index.ts', 'index.js', 'mod.ts'}
SCHEMA_NAMES = {'schema.json'}
EXPORT_MARKER = 'export '


class Classification(NamedTuple):
    score: int
    category: Category


class PathInfo(NamedTuple):
    """Pieces of a relative path the rules look at."""

    path: str
    filename: str
    extension: str
    directory: str
    content: str

    @classmethod
    def parse(cls, relative_path: str, content: str) -> 'PathInfo':
        path = relative_path.replace('\\', '/')
        filename = posixpath.basename(path)
        return cls(
            path=path,
            filename=filename,
            extension=posixpath.splitext(filename)[1],
            directory=posixpath.dirname(path) or '.',
            content=content,
        )


Rule = Tuple[Callable[[PathInfo], bool], int, Category]


def _is_type_declaration(f: PathInfo) -> bool:
    return (f.filename.endswith('.d.ts')
            or 'types' in f.filename
            or 'interface' in f.filename)


def _is_test(f: PathInfo) -> bool:
    return '.spec.' in f.path or '.test.' in f.path or '__tests__' in f.directory


def _is_example_dir(f: PathInfo) -> bool:
    return 'example' in f.directory or 'demo' in f.directory


def _is_exporting_source(f: PathInfo) -> bool:
    return f.extension in SOURCE_EXTENSIONS and EXPORT_MARKER in f.content


RULES: Tuple[Rule, ...] = (
    (_is_type_declaration, 100, Category.TYPES),
    (lambda f: f.filename in ENTRY_POINT_NAMES, 95, Category.EXPORTS),
    (_is_test, 92, Category.TESTS),
    (lambda f: f.filename == 'package.json', 90, Category.CONFIG),
    (lambda f: f.filename.lower() == 'readme.md', 85, Category.EXAMPLES),
    (lambda f: f.filename in SCHEMA_NAMES, 80, Category.TYPES),
    (_is_example_dir, 75, Category.EXAMPLES),
    (_is_exporting_source, 50, Category.SOURCE),
    (lambda f: f.extension in SOURCE_EXTENSIONS, 40, Category.SOURCE),
    (lambda f: f.extension in CONFIG_EXTENSIONS, 30, Category.CONFIG),
)

FALLBACK = Classification(10, Category.SOURCE)


def classify(relative_path: str, content: str) -> Classification:
    """
    Assign a priority score and category to a file.

    Args:
        relative_path: Path relative to the scan root.
        content: Raw file text.

    Returns:
        The (score, category) of the first matching rule, or the fallback.
    """
    info = PathInfo.parse(relative_path, content)
    for predicate, score, category in RULES:
        if predicate(info):
            return Classification(score, category)
    return FALLBACK


def score_file(candidate: CandidateFile) -> ScoredFile:
    """Annotate one candidate with its classification and token estimate."""
    score, category = classify(candidate.relative_path, candidate.content)
    return ScoredFile(
        path=candidate.path,
        relative_path=candidate.relative_path,
        content=candidate.content,
        score=score,
        category=category,
        tokens=estimate_tokens(candidate.content),
    )


def score_files(candidates: Iterable[CandidateFile]) -> List[ScoredFile]:
    """
    Classify candidates and sort them for allocation.

    Higher scores come first; ties are ordered by relative path so the
    sequence is reproducible across platforms.
    """
    scored = [score_file(c) for c in candidates]
    scored.sort(key=lambda f: (-f.score, f.relative_path))
    return scored
