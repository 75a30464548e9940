import pytest

from repo2ctx.core.classifier import FALLBACK, PathInfo, classify, score_file, score_files
from repo2ctx.core.models import CandidateFile, Category


class TestClassify:
    @pytest.mark.parametrize("path,content,score,category", [
        ("src/index.d.ts", "", 100, Category.TYPES),
        ("src/types.ts", "", 100, Category.TYPES),
        ("src/interfaces.js", "", 100, Category.TYPES),
        ("src/index.ts", "", 95, Category.EXPORTS),
        ("index.js", "", 95, Category.EXPORTS),
        ("mod.ts", "", 95, Category.EXPORTS),
        ("src/a.spec.ts", "", 92, Category.TESTS),
        ("src/a.test.js", "", 92, Category.TESTS),
        ("src/__tests__/a.ts", "", 92, Category.TESTS),
        ("package.json", "", 90, Category.CONFIG),
        ("README.md", "", 85, Category.EXAMPLES),
        ("docs/Readme.MD", "", 85, Category.EXAMPLES),
        ("schema.json", "", 80, Category.TYPES),
        ("src/schema.d.ts", "", 100, Category.TYPES),
        ("examples/app.json", "", 75, Category.EXAMPLES),
        ("demo/main.js", "", 75, Category.EXAMPLES),
        ("src/math.ts", "export const x = 1;", 50, Category.SOURCE),
        ("src/App.svelte", "<script>export let a;</script>", 50, Category.SOURCE),
        ("src/math.ts", "const x = 1;", 40, Category.SOURCE),
        ("src/page.html", "<p></p>", 40, Category.SOURCE),
        ("tsconfig.json", "{}", 30, Category.CONFIG),
        ("config.yml", "", 30, Category.CONFIG),
        ("docs/guide.md", "", 10, Category.SOURCE),
        ("Makefile", "", 10, Category.SOURCE),
    ])
    def test_rules(self, path, content, score, category):
        assert classify(path, content) == (score, category)

    def test_first_match_wins(self):
        # Matches the type-declaration rule before the test rule
        assert classify("src/types.test.ts", "") == (100, Category.TYPES)
        # The readme inside an example directory still scores as the readme
        assert classify("examples/README.md", "") == (85, Category.EXAMPLES)
        # Exporting source in a demo directory is an example
        assert classify("demo/app.ts", "export default 1") == (75, Category.EXAMPLES)

    def test_export_marker_needs_trailing_space(self):
        assert classify("src/a.js", "module.exports = 1")[0] == 40

    def test_fallback(self):
        assert classify("notes.txt", "anything") == FALLBACK

    def test_root_file_directory(self):
        assert PathInfo.parse("index.ts", "").directory == "."
        assert PathInfo.parse("a\\b\\c.ts", "").directory == "a/b"


class TestScoreFiles:
    def test_score_file_adds_estimate(self):
        candidate = CandidateFile(path="/r/src/a.ts", relative_path="src/a.ts", content="a" * 7)
        scored = score_file(candidate)
        assert scored.tokens == 2
        assert scored.score == 40
        assert scored.path == "/r/src/a.ts"

    def test_sorted_by_score_then_path(self):
        candidates = [
            CandidateFile("/r/z.ts", "z.ts", "export const z = 1;"),
            CandidateFile("/r/README.md", "README.md", "# hi"),
            CandidateFile("/r/a.ts", "a.ts", "export const a = 1;"),
            CandidateFile("/r/types.ts", "types.ts", ""),
            CandidateFile("/r/data.json", "data.json", "{}"),
        ]
        order = [f.relative_path for f in score_files(candidates)]
        assert order == ["types.ts", "README.md", "a.ts", "z.ts", "data.json"]

    def test_sort_is_input_order_independent(self):
        candidates = [
            CandidateFile("/r/b.ts", "b.ts", ""),
            CandidateFile("/r/a.ts", "a.ts", ""),
        ]
        forward = [f.relative_path for f in score_files(candidates)]
        backward = [f.relative_path for f in score_files(reversed(candidates))]
        assert forward == backward == ["a.ts", "b.ts"]
