"""
Token estimation for repo2ctx.

All budgeting uses ``estimate_tokens``, a deterministic character-based
approximation. ``TokenCounter`` wraps tiktoken and is only used to report an
exact count next to the estimate; it never influences selection.
"""

import logging
from typing import Any, Dict, Optional

import tiktoken

logger = logging.getLogger(__name__)

# One token per 3.5 characters, kept as a ratio so the math stays integral
_CHARS_NUMERATOR = 7
_CHARS_DENOMINATOR = 2


def estimate_tokens(text: str) -> int:
    """
    Estimate the token count of ``text`` as ``ceil(len(text) / 3.5)``.

    Args:
        text: The text to estimate.

    Returns:
        Estimated number of tokens; 0 for empty text.
    """
    if not text:
        return 0
    scaled = len(text) * _CHARS_DENOMINATOR
    return (scaled + _CHARS_NUMERATOR - 1) // _CHARS_NUMERATOR


class TokenCounter:
    """
    Exact token counting through a tiktoken encoding.

    The encoding is loaded lazily on first use. If it cannot be loaded (for
    example no network to fetch the BPE file) counting reports 0.
    """

    def __init__(self, encoding_name: str = "cl100k_base"):
        """
        Initialize the token counter.

        Args:
            encoding_name: The name of the tiktoken encoding to use.
        """
        self.encoding_name = encoding_name
        self.encoder: Optional[Any] = None
        self._loaded = False

    def _load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        try:
            self.encoder = tiktoken.get_encoding(self.encoding_name)
        except Exception as e:
            logger.warning(f"Failed to initialize token encoder '{self.encoding_name}': {e}")

    @property
    def is_available(self) -> bool:
        """Check if exact counting is available."""
        self._load()
        return self.encoder is not None

    def count(self, text: str) -> int:
        """
        Count tokens in the given text.

        Returns:
            Number of tokens, or 0 if counting is unavailable.
        """
        if not text or not self.is_available:
            return 0
        return len(self.encoder.encode(text, disallowed_special=()))

    def count_batch(self, texts: Dict[str, str]) -> Dict[str, int]:
        """Count tokens for multiple texts keyed by identifier."""
        return {key: self.count(text) for key, text in texts.items()}
