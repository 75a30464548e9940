"""
Text decoding for discovered files.

Source files are read as bytes and turned into text by trying a short list
of encodings in order. Content that looks binary is rejected before any
decoding is attempted.
"""

import logging
from typing import List, NamedTuple, Optional


DEFAULT_ENCODINGS = ['utf-8', 'latin-1']

# Bytes treated as text even though they are below 0x20
_TEXT_CONTROL_BYTES = frozenset(b'\t\n\r')
# Share of control bytes above which undecodable content counts as binary
_CONTROL_RATIO = 0.3

logger = logging.getLogger(__name__)


class DecodeResult(NamedTuple):
    text: Optional[str]
    encoding: Optional[str]
    error: Optional[str]


class EncodingDetector:
    """Decodes file bytes with an ordered list of fallback encodings."""

    def __init__(self, fallback_encodings: Optional[List[str]] = None):
        self.encodings = list(fallback_encodings or DEFAULT_ENCODINGS)

    def decode_bytes(self, content: bytes, file_path: Optional[str] = None) -> DecodeResult:
        """
        Decode ``content`` with the first encoding that accepts it.

        Unknown encoding names in the list are skipped.

        Args:
            content: Raw file bytes.
            file_path: Used in log messages only.

        Returns:
            DecodeResult; ``text`` is None and ``error`` set when every
            encoding failed.
        """
        failed_at = None
        for encoding in self.encodings:
            try:
                text = content.decode(encoding)
            except UnicodeDecodeError as e:
                failed_at = e.start
                continue
            except LookupError:
                logger.debug(f"Unknown encoding {encoding!r} skipped")
                continue
            logger.debug(f"Decoded {file_path} as {encoding}")
            return DecodeResult(text, encoding, None)

        error = f"Unable to decode file with available encodings ({', '.join(self.encodings)})"
        if failed_at is not None:
            error += f" - failed at byte {failed_at}"
        return DecodeResult(None, None, error)

    @staticmethod
    def is_likely_binary(content: bytes, sample_size: int = 8192) -> bool:
        """
        Sniff the head of ``content`` for binary data.

        A null byte is always binary. Otherwise valid UTF-8 is text, and other
        content is binary only when control bytes make up a large share of
        the sample.
        """
        sample = content[:sample_size]
        if b'\x00' in sample:
            return True

        try:
            sample.decode('utf-8')
        except UnicodeDecodeError:
            controls = sum(1 for b in sample if b < 0x20 and b not in _TEXT_CONTROL_BYTES)
            return controls > len(sample) * _CONTROL_RATIO
        return False
