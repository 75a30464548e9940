import json

import pytest

from repo2ctx.config import (
    CONFIG_FILE,
    OutputConfig,
    ProjectConfig,
    RepoConfig,
    config_path,
    load_config,
    save_config,
)
from repo2ctx.core.models import Config
from repo2ctx.exceptions import ConfigError


def _write(directory, data):
    path = directory / CONFIG_FILE
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(str(tmp_path))
        assert config.repos == []
        assert config.output == OutputConfig()
        assert config.output.max_tokens == 100_000
        assert config.output.budget_policy == "fixed-denominator"

    def test_full_file(self, tmp_path):
        _write(tmp_path, {
            "repos": [
                {"url": "https://github.com/a/b.git", "ref": "v2", "paths": ["src"]},
                {"url": "https://github.com/c/d.git", "exclude": ["**/legacy/**"]},
            ],
            "output": {"format": "xml", "max_tokens": 5000, "include_tests": False,
                       "budget_policy": "remaining-count"},
        })
        config = load_config(str(tmp_path))
        assert config.repos[0] == RepoConfig(url="https://github.com/a/b.git", ref="v2", paths=["src"])
        assert config.repos[1].exclude == ["**/legacy/**"]
        assert config.output == OutputConfig(format="xml", max_tokens=5000,
                                             include_tests=False, budget_policy="remaining-count")

    def test_camel_case_keys(self, tmp_path):
        _write(tmp_path, {"repos": [], "output": {"maxTokens": 42, "includeTests": False}})
        output = load_config(str(tmp_path)).output
        assert output.max_tokens == 42
        assert output.include_tests is False

    def test_unknown_keys_ignored(self, tmp_path):
        _write(tmp_path, {"repos": [{"url": "x/y", "stars": 5}], "extra": True})
        assert load_config(str(tmp_path)).repos[0].url == "x/y"

    @pytest.mark.parametrize("data", [
        "{not json",
        "[]",
        {"repos": {}},
        {"repos": [{"ref": "main"}]},
        {"repos": [{"url": "a/b", "paths": "src"}]},
        {"repos": [{"url": "a/b", "ref": 3}]},
        {"output": []},
        {"output": {"format": "html"}},
        {"output": {"max_tokens": "lots"}},
        {"output": {"max_tokens": True}},
        {"output": {"include_tests": "yes"}},
        {"output": {"budget_policy": "even"}},
    ])
    def test_invalid(self, tmp_path, data):
        _write(tmp_path, data)
        with pytest.raises(ConfigError):
            load_config(str(tmp_path))


class TestSaveConfig:
    def test_round_trip(self, tmp_path):
        config = ProjectConfig(
            repos=[RepoConfig(url="https://github.com/a/b.git", paths=["lib"])],
            output=OutputConfig(format="xml", max_tokens=1234),
        )
        path = save_config(config, str(tmp_path))
        assert path == config_path(str(tmp_path))
        assert load_config(str(tmp_path)) == config

    def test_none_fields_omitted(self, tmp_path):
        save_config(ProjectConfig(repos=[RepoConfig(url="u")]), str(tmp_path))
        data = json.loads((tmp_path / CONFIG_FILE).read_text())
        assert data["repos"] == [{"url": "u"}]
        assert data["output"]["format"] == "markdown"


class TestRuntimeConfig:
    def test_cache_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REPO2CTX_CACHE_DIR", str(tmp_path / "cache"))
        assert Config().cache_dir == tmp_path / "cache"

    def test_defaults(self):
        config = Config()
        assert config.max_file_size == 100 * 1024
        assert config.encoding_fallbacks == ["utf-8", "latin-1"]
        assert ".png" in config.binary_extensions
