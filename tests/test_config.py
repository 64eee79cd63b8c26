"""
Tests for Configuration
=======================
Settings loading (markov_words.settings) and GenerationConfig validation.
"""

from pathlib import Path

import pytest

from markov_words import ConfigurationError, GenerationConfig
from markov_words.generator import WordGenerator
from markov_words.settings import (
    CONFIG_ENV_VAR,
    get_setting,
    load_app_config,
    resolve_path,
    APP_CONFIG_PATH,
    PROJECT_ROOT,
)


@pytest.fixture
def custom_config(tmp_path, monkeypatch):
    """Point settings at a YAML file written by the test."""
    path = tmp_path / "app.yaml"

    def _write(text):
        path.write_text(text)
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        load_app_config.cache_clear()

    yield _write
    load_app_config.cache_clear()


class TestSettings:
    """Tests for the YAML settings loader."""

    def test_defaults(self):
        assert get_setting("generator.gram_size") == 2
        assert get_setting("generator.min_length") == 3
        assert get_setting("generator.max_length") == 16
        assert get_setting("generator.caching_enabled") is True
        assert get_setting("store.cache_key") == "words"

    def test_missing_setting(self):
        assert get_setting("generator.nope") is None
        assert get_setting("nope.nope", 5) == 5

    def test_resolve_path(self):
        assert resolve_path("~/x") == Path.home() / "x"
        assert resolve_path("data/x") == PROJECT_ROOT / "data" / "x"
        assert resolve_path("x", base=Path("/base")) == Path("/base/x")
        with pytest.raises(ValueError):
            resolve_path(None)

    def test_env_override(self, custom_config):
        custom_config("generator:\n  gram_size: 4\n")
        assert get_setting("generator.gram_size") == 4

    def test_settings_ship_inside_package(self):
        import markov_words
        assert PROJECT_ROOT == Path(markov_words.__file__).resolve().parent
        assert APP_CONFIG_PATH.is_file()

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.yaml"))
        load_app_config.cache_clear()
        try:
            with pytest.raises(ConfigurationError, match="nope.yaml"):
                get_setting("generator.gram_size")
            with pytest.raises(ConfigurationError):
                GenerationConfig(corpus_source=["cat"])
        finally:
            load_app_config.cache_clear()

    def test_invalid_yaml(self, custom_config):
        custom_config("generator: [unclosed\n")
        with pytest.raises(ConfigurationError):
            get_setting("generator.gram_size")


class TestGenerationConfig:
    """Tests for GenerationConfig defaults and validation."""

    def test_defaults_from_settings(self):
        cfg = GenerationConfig(corpus_source=["cat"])
        assert cfg.gram_size == 2
        assert cfg.min_length == 3
        assert cfg.max_length == 16
        assert cfg.caching_enabled is True
        assert cfg.cache_capacity == 70
        assert cfg.flush_on_open is False
        assert cfg.corpus_source == ("cat",)

    def test_default_store_paths_include_gram_size(self):
        cfg = GenerationConfig(corpus_source=["cat"], gram_size=3)
        assert cfg.data_path.name == "markov_words_3.data"
        assert cfg.cache_path.name == "markov_words_3.cache"

    def test_default_corpus(self):
        assert GenerationConfig().corpus_source == Path("/usr/share/dict/words")

    def test_relative_paths_use_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = GenerationConfig(corpus_source="words.txt", data_path="d.data")
        assert cfg.corpus_source == tmp_path.resolve() / "words.txt"
        assert cfg.data_path == tmp_path.resolve() / "d.data"

    def test_immutable(self):
        cfg = GenerationConfig(corpus_source=["cat"])
        with pytest.raises(AttributeError):
            cfg.gram_size = 5

    def test_max_length_needs_room_for_a_letter(self):
        with pytest.raises(ConfigurationError, match="max_length"):
            GenerationConfig(corpus_source=["cat"], min_length=0, max_length=1)

    @pytest.mark.parametrize("options", [
        {"gram_size": 0},
        {"max_length": 0},
        {"min_length": -1},
        {"min_length": 5, "max_length": 5},
        {"min_length": 6, "max_length": 5},
        {"caching_enabled": True, "cache_capacity": 0},
        {"max_attempts": 0},
        {"gram_size": "2"},
        {"gram_size": True},
    ])
    def test_invalid(self, options):
        with pytest.raises(ConfigurationError):
            GenerationConfig(corpus_source=["cat"], **options)

    def test_zero_capacity_ok_without_caching(self):
        cfg = GenerationConfig(corpus_source=["cat"], caching_enabled=False, cache_capacity=0)
        assert cfg.cache_capacity == 0

    def test_bad_corpus_source(self):
        with pytest.raises(ConfigurationError):
            GenerationConfig(corpus_source=42)
        with pytest.raises(ConfigurationError):
            GenerationConfig(corpus_source=["cat", 3])

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            GenerationConfig(corpus_source=["cat"], gram_size=0)

    def test_missing_settings(self, custom_config):
        custom_config("generator:\n  gram_size: 2\n")
        with pytest.raises(ConfigurationError, match="min_length"):
            GenerationConfig(corpus_source=["cat"])

    def test_missing_data_dir(self, custom_config, tmp_path):
        custom_config(
            "generator:\n"
            "  corpus_source: words\n  gram_size: 2\n  min_length: 3\n  max_length: 16\n"
            "  caching_enabled: false\n  cache_capacity: 70\n  flush_on_open: false\n"
            "  max_attempts: 100\n"
        )
        with pytest.raises(ConfigurationError, match="data_dir"):
            GenerationConfig()
        cfg = GenerationConfig(data_path=tmp_path / "d", cache_path=tmp_path / "c")
        assert cfg.data_path == tmp_path / "d"


class TestConfigReplace:
    """Tests for overriding fields of an existing GenerationConfig."""

    def test_store_paths_follow_gram_size(self, custom_config, tmp_path):
        custom_config(
            "generator:\n"
            "  corpus_source: words\n  gram_size: 2\n  min_length: 3\n  max_length: 16\n"
            "  caching_enabled: false\n  cache_capacity: 70\n  flush_on_open: false\n"
            f"  max_attempts: 100\n  data_dir: {tmp_path}\n"
        )
        cfg = GenerationConfig(corpus_source=["cat"], gram_size=2, caching_enabled=False)
        assert cfg.data_path.name == "markov_words_2.data"

        changed = cfg.replace(gram_size=3)
        assert changed.gram_size == 3
        assert changed.data_path == tmp_path / "markov_words_3.data"
        assert changed.cache_path == tmp_path / "markov_words_3.cache"
        assert changed.corpus_source == ("cat",)
        assert changed.caching_enabled is False

        gen = WordGenerator(config=cfg, gram_size=3)
        assert gen.config.data_path.name == "markov_words_3.data"
        assert gen.data_store.file_path == tmp_path / "markov_words_3.data"

    def test_explicit_paths_are_kept(self, tmp_path):
        cfg = GenerationConfig(corpus_source=["cat"], gram_size=2, caching_enabled=False,
                               data_path=tmp_path / "mine.data")
        changed = cfg.replace(gram_size=3)
        assert changed.data_path == tmp_path / "mine.data"

    def test_changes_are_validated(self):
        cfg = GenerationConfig(corpus_source=["cat"], caching_enabled=False)
        with pytest.raises(ConfigurationError):
            cfg.replace(min_length=20)

    def test_original_unchanged(self):
        cfg = GenerationConfig(corpus_source=["cat"], caching_enabled=False)
        cfg.replace(gram_size=4)
        assert cfg.gram_size == 2
