"""Core components for repo2ctx."""

from .models import (
    BuildResult,
    CandidateFile,
    Category,
    Config,
    GroupInfo,
    GroupResult,
    ScoredFile,
    Selection,
)
from .tokenizer import TokenCounter, estimate_tokens
from .file_analyzer import FileAnalyzer
from .discovery import FileDiscovery, FilterOptions, discover_files
from .classifier import classify, score_files
from .allocator import BudgetPolicy, allocate, select_files
from .serializer import OutputFormat, render
from .builder import ContextBuilder, GroupSpec, write_document

__all__ = [
    "BuildResult",
    "CandidateFile",
    "Category",
    "Config",
    "GroupInfo",
    "GroupResult",
    "ScoredFile",
    "Selection",
    "TokenCounter",
    "estimate_tokens",
    "FileAnalyzer",
    "FileDiscovery",
    "FilterOptions",
    "discover_files",
    "classify",
    "score_files",
    "BudgetPolicy",
    "allocate",
    "select_files",
    "OutputFormat",
    "render",
    "ContextBuilder",
    "GroupSpec",
    "write_document",
]
