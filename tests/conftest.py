import pytest
from pathlib import Path

from repo2ctx.core.models import Category, ScoredFile


@pytest.fixture
def sample_repo(tmp_path):
    """Create a sample library repository for discovery tests."""
    repo_root = tmp_path / "sample_repo"
    repo_root.mkdir()

    (repo_root / "src").mkdir()
    (repo_root / "src" / "__tests__").mkdir()
    (repo_root / "examples").mkdir()
    (repo_root / "node_modules" / "dep").mkdir(parents=True)
    (repo_root / ".git").mkdir()
    (repo_root / "dist").mkdir()

    (repo_root / "README.md").write_text("# Sample\n\nA sample library.\n")
    (repo_root / "package.json").write_text('{"name": "sample", "main": "dist/index.js"}\n')
    (repo_root / "CHANGELOG.md").write_text("## 1.0.0\n")
    (repo_root / "src" / "index.ts").write_text("export { add } from './math';\n")
    (repo_root / "src" / "math.ts").write_text("export function add(a: number, b: number) {\n  return a + b;\n}\n")
    (repo_root / "src" / "helpers.js").write_text("function noop() {}\n")
    (repo_root / "src" / "types.d.ts").write_text("export type Num = number;\n")
    (repo_root / "src" / "math.test.ts").write_text("test('add', () => expect(add(1, 2)).toBe(3));\n")
    (repo_root / "src" / "__tests__" / "util.ts").write_text("test('noop', () => {});\n")
    (repo_root / "examples" / "basic.js").write_text("import { add } from 'sample';\nadd(1, 2);\n")
    (repo_root / "node_modules" / "dep" / "index.js").write_text("module.exports = 1;\n")
    (repo_root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (repo_root / "dist" / "index.js").write_text("export const add = (a, b) => a + b;\n")
    (repo_root / "logo.svg.md").write_bytes(b"\x00\x01\x02binary")

    return repo_root


def make_scored(relative_path: str, tokens: int, score: int = 50,
                category: Category = Category.SOURCE, content: str = "") -> ScoredFile:
    """Build a ScoredFile with a fixed token estimate."""
    return ScoredFile(
        path=str(Path("/repo") / relative_path),
        relative_path=relative_path,
        content=content,
        score=score,
        category=category,
        tokens=tokens,
    )


@pytest.fixture
def scored():
    return make_scored
