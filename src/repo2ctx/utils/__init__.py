"""Utility modules for repo2ctx."""

from .encodings import EncodingDetector
from .path_utils import PathUtils, glob_match, match_any

__all__ = ["EncodingDetector", "PathUtils", "glob_match", "match_any"]
