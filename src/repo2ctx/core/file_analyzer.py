"""
File analysis module for repo2ctx.

This module handles individual file processing including:
- Binary file detection
- The per-file size cap
- Encoding fallbacks when reading content
"""

import os
from pathlib import Path
from typing import Optional, Tuple

from .models import Config
from ..utils.encodings import EncodingDetector


class FileAnalyzer:
    """Reads single files as text, reporting why a file was rejected."""

    def __init__(self, config: Config):
        self.config = config
        self.decoder = EncodingDetector(config.encoding_fallbacks)

    def has_binary_extension(self, file_path: str) -> bool:
        """Check the file extension against the binary extension set."""
        return Path(file_path).suffix.lower() in self.config.binary_extensions

    def is_binary_file(self, file_path: str, content: Optional[bytes] = None) -> bool:
        """
        Binary file detection.

        1. Check file extension against known binary extensions
        2. If content is given, sniff it for null bytes / control characters
        """
        if self.has_binary_extension(file_path):
            return True
        if content:
            return EncodingDetector.is_likely_binary(content, self.config.binary_sample_size)
        return False

    def read_file_content(self, file_path: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Read file content with multiple encoding fallbacks.

        Returns:
            Tuple of (content, error_message)
            If successful, content is the file text and error_message is None
            If failed, content is None and error_message describes the issue
        """
        try:
            file_size = os.path.getsize(file_path)
            if file_size > self.config.max_file_size:
                return None, f"File too large ({file_size:,} bytes)"

            with open(file_path, 'rb') as f:
                raw_content = f.read()
        except PermissionError:
            return None, "Permission denied"
        except FileNotFoundError:
            return None, "File not found"
        except OSError as e:
            return None, f"Error reading file: {e}"

        if self.is_binary_file(file_path, raw_content):
            return None, "Binary file"

        text, _, error = self.decoder.decode_bytes(raw_content, file_path)
        if text is None:
            return None, error
        return text, None
