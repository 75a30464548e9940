import os
import pytest

from repo2ctx.core.discovery import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    FileDiscovery,
    FilterOptions,
    discover_files,
)
from repo2ctx.core.models import Config
from repo2ctx.exceptions import ConfigError


class TestFilterOptions:
    def test_defaults(self):
        options = FilterOptions()
        assert options.include_patterns() == DEFAULT_INCLUDE
        assert options.exclude_patterns() == DEFAULT_EXCLUDE

    def test_restriction_replaces_include(self):
        options = FilterOptions(paths=["src", "./lib/"], include=["**/*.py"])
        assert options.include_patterns() == ["src/**/*", "lib/**/*"]

    def test_explicit_include(self):
        assert FilterOptions(include=["**/*.py"]).include_patterns() == ["**/*.py"]

    def test_extra_excludes_and_tests(self):
        patterns = FilterOptions(exclude=["**/legacy/**"], include_tests=False).exclude_patterns()
        assert "**/legacy/**" in patterns
        assert "**/*.test.*" in patterns
        assert "**/__tests__/**" in patterns

    @pytest.mark.parametrize("paths", [
        [""],
        ["   "],
        ["/etc"],
        ["C:\\code"],
        ["../other"],
        ["src/../../up"],
    ])
    def test_malformed_restriction(self, paths):
        with pytest.raises(ConfigError):
            FilterOptions(paths=paths).restricted_paths()

    def test_windows_separators_normalized(self):
        assert FilterOptions(paths=["packages\\core"]).restricted_paths() == ["packages/core"]


class TestFileDiscovery:
    @pytest.fixture
    def discovery(self):
        return FileDiscovery(Config())

    def test_list_paths_defaults(self, discovery, sample_repo):
        paths = discovery.list_paths(str(sample_repo), FilterOptions())
        assert paths == [
            "README.md",
            "logo.svg.md",
            "package.json",
            "examples/basic.js",
            "src/helpers.js",
            "src/index.ts",
            "src/math.test.ts",
            "src/math.ts",
            "src/types.d.ts",
            "src/__tests__/util.ts",
        ]

    def test_builtin_exclusions_win_over_includes(self, discovery, sample_repo):
        options = FilterOptions(include=["**/*"])
        paths = discovery.list_paths(str(sample_repo), options)
        assert not any(p.startswith("node_modules/") for p in paths)
        assert not any(p.startswith("dist/") for p in paths)
        assert not any(p.startswith(".git/") for p in paths)
        assert "CHANGELOG.md" not in paths

    def test_exclusion_applies_to_restriction(self, discovery, sample_repo):
        (sample_repo / "src" / "node_modules").mkdir()
        (sample_repo / "src" / "node_modules" / "x.ts").write_text("export {}")
        paths = discovery.list_paths(str(sample_repo), FilterOptions(paths=["src"]))
        assert "src/node_modules/x.ts" not in paths

    def test_restriction_includes_any_extension(self, discovery, sample_repo):
        (sample_repo / "src" / "notes.txt").write_text("notes")
        paths = discovery.list_paths(str(sample_repo), FilterOptions(paths=["src"]))
        assert "src/notes.txt" in paths
        assert all(p.startswith("src/") for p in paths)

    def test_missing_restricted_path_is_empty(self, discovery, sample_repo):
        assert discovery.list_paths(str(sample_repo), FilterOptions(paths=["nope"])) == []

    def test_exclude_tests(self, discovery, sample_repo):
        paths = discovery.list_paths(str(sample_repo), FilterOptions(include_tests=False))
        assert "src/math.test.ts" not in paths
        assert "src/__tests__/util.ts" not in paths
        assert "src/math.ts" in paths

    def test_hidden_files_not_matched_by_wildcards(self, discovery, sample_repo):
        (sample_repo / ".eslintrc.json").write_text("{}")
        paths = discovery.list_paths(str(sample_repo), FilterOptions())
        assert ".eslintrc.json" not in paths

    def test_brace_include(self, discovery, sample_repo):
        paths = discovery.list_paths(str(sample_repo), FilterOptions(include=["**/*.{ts,js}"]))
        assert {"src/index.ts", "src/math.ts", "examples/basic.js", "src/helpers.js"} <= set(paths)
        assert "README.md" not in paths
        assert "package.json" not in paths

    def test_brace_exclude(self, discovery, sample_repo):
        (sample_repo / "src" / "math.spec.ts").write_text("test('x', () => {});\n")
        options = FilterOptions(exclude=["**/*.{test,spec}.ts"])
        paths = discovery.list_paths(str(sample_repo), options)
        assert "src/math.test.ts" not in paths
        assert "src/math.spec.ts" not in paths
        assert "src/math.ts" in paths

    def test_discover_is_repeatable(self, discovery, sample_repo):
        first = discovery.discover(str(sample_repo))
        second = discovery.discover(str(sample_repo))
        assert first
        assert first == second

    def test_discover_reads_content(self, discovery, sample_repo):
        candidates = discovery.discover(str(sample_repo))
        by_path = {c.relative_path: c for c in candidates}
        assert by_path["src/index.ts"].content == "export { add } from './math';\n"
        assert os.path.isabs(by_path["src/index.ts"].path)

    def test_discover_drops_unreadable_files(self, discovery, sample_repo):
        (sample_repo / "big.json").write_text("x" * (100 * 1024 + 1))
        (sample_repo / "image.png.md").write_bytes(b"\x89PNG\x00")
        relative = [c.relative_path for c in discovery.discover(str(sample_repo))]
        assert "logo.svg.md" not in relative
        assert "big.json" not in relative
        assert "image.png.md" not in relative

    def test_discover_drops_binary_extension(self, sample_repo):
        (sample_repo / "src" / "icon.svg").write_text("<svg/>")
        candidates = discover_files(str(sample_repo), FilterOptions(paths=["src"]))
        assert "src/icon.svg" not in [c.relative_path for c in candidates]

    def test_discover_missing_root(self, discovery, tmp_path):
        with pytest.raises(ConfigError):
            discovery.discover(str(tmp_path / "missing"))

    def test_discover_bad_restriction(self, discovery, sample_repo):
        with pytest.raises(ConfigError):
            discovery.discover(str(sample_repo), FilterOptions(paths=["../x"]))

    def test_empty_tree(self, discovery, tmp_path):
        assert discovery.discover(str(tmp_path)) == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_skipped(self, discovery, sample_repo, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.ts").write_text("export const s = 1;")
        try:
            os.symlink(outside, sample_repo / "src" / "linked")
        except OSError:
            pytest.skip("cannot create symlink")
        paths = discovery.list_paths(str(sample_repo), FilterOptions())
        assert not any("linked" in p for p in paths)
