import pytest
from unittest.mock import patch, mock_open

from repo2ctx.core.file_analyzer import FileAnalyzer
from repo2ctx.core.models import Config
from repo2ctx.utils.encodings import EncodingDetector


class TestFileAnalyzer:
    @pytest.fixture
    def analyzer(self):
        return FileAnalyzer(Config())

    def test_is_binary_file_by_extension(self, analyzer):
        assert analyzer.is_binary_file("/path/to/logo.png") is True
        assert analyzer.is_binary_file("/path/to/doc.PDF") is True
        assert analyzer.is_binary_file("/path/to/index.ts") is False

    def test_is_binary_file_by_content(self, analyzer):
        assert analyzer.is_binary_file("/path/to/file.ts", b'hello world') is False

    def test_is_binary_file_with_null_bytes(self, analyzer):
        assert analyzer.is_binary_file("/path/to/file.js", b'hello\x00world') is True

    @patch('os.path.getsize', return_value=100)
    @patch('builtins.open', new_callable=mock_open, read_data=b'export const a = 1;\n')
    def test_read_file_content_success(self, mock_file, mock_size, analyzer):
        content, error = analyzer.read_file_content("/path/to/a.ts")
        assert content == "export const a = 1;\n"
        assert error is None

    @patch('os.path.getsize', return_value=100 * 1024 + 1)
    def test_read_file_content_too_large(self, mock_size, analyzer):
        content, error = analyzer.read_file_content("/path/to/large.js")
        assert content is None
        assert "File too large" in error

    @patch('os.path.getsize', return_value=100 * 1024)
    @patch('builtins.open', new_callable=mock_open, read_data=b'a')
    def test_read_file_content_at_size_cap(self, mock_file, mock_size, analyzer):
        content, error = analyzer.read_file_content("/path/to/edge.js")
        assert content == "a"

    @patch('os.path.getsize', return_value=100)
    @patch('builtins.open', new_callable=mock_open, read_data=b'\x89PNG\r\n\x1a\n\x00\x00')
    def test_read_file_content_binary(self, mock_file, mock_size, analyzer):
        content, error = analyzer.read_file_content("/path/to/image.json")
        assert content is None
        assert error == "Binary file"

    @patch('os.path.getsize', return_value=100)
    def test_read_file_content_permission_error(self, mock_size, analyzer):
        with patch('builtins.open', side_effect=PermissionError("Access denied")):
            content, error = analyzer.read_file_content("/path/to/file.ts")
            assert content is None
            assert error == "Permission denied"

    def test_read_file_content_missing(self, analyzer, tmp_path):
        content, error = analyzer.read_file_content(str(tmp_path / "missing.ts"))
        assert content is None
        assert error == "File not found"

    def test_latin1_fallback(self, analyzer, tmp_path):
        path = tmp_path / "legacy.js"
        path.write_bytes("// café\n".encode("latin-1"))
        content, error = analyzer.read_file_content(str(path))
        assert error is None
        assert content == "// café\n"


class TestEncodingDetector:
    def test_decode_utf8(self):
        text, encoding, error = EncodingDetector().decode_bytes("hé".encode("utf-8"))
        assert text == "hé"
        assert encoding == "utf-8"
        assert error is None

    def test_decode_failure_reports_position(self):
        detector = EncodingDetector(["utf-8"])
        text, encoding, error = detector.decode_bytes(b"ok\xff")
        assert text is None and encoding is None
        assert "failed at byte 2" in error

    def test_unknown_encoding_skipped(self):
        detector = EncodingDetector(["no-such-codec", "utf-8"])
        text, encoding, _ = detector.decode_bytes(b"abc")
        assert text == "abc"
        assert encoding == "utf-8"

    def test_is_likely_binary(self):
        assert EncodingDetector.is_likely_binary(b"\x00abc")
        assert not EncodingDetector.is_likely_binary("plain text é".encode("utf-8"))
        assert EncodingDetector.is_likely_binary(bytes([1, 2, 3, 4, 0xff]))
        assert not EncodingDetector.is_likely_binary("café menu".encode("latin-1"))
