"""
Tests for configuration loading.

Covers:
- deep_merge semantics
- YAML file loading (missing file, empty file)
- LOKAT_* environment overrides
- CLI overrides and precedence (defaults < YAML < env < CLI)
- Schema validation (locales splitting, ref default, extra fields)
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from lokat.config.loader import (
    apply_cli_overrides,
    deep_merge,
    load_config,
    load_env_overrides,
    load_yaml_config,
)
from lokat.config.schema import AppConfig, GenConfig, RuntimeConfig

ENV_VARS = ("LOKAT_IN", "LOKAT_OUT", "LOKAT_LOCALES", "LOKAT_REF", "LOKAT_LOG_LEVEL", "LOKAT_LANGUAGE")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_yaml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "lokat.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ── deep_merge ────────────────────────────────────────────────────────────


class TestDeepMerge:
    def test_nested_override(self):
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        override = {"a": {"b": 99}, "e": 4}
        assert deep_merge(base, override) == {"a": {"b": 99, "c": 2}, "d": 3, "e": 4}

    def test_does_not_mutate_inputs(self):
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}

    def test_non_dict_replaces_dict(self):
        assert deep_merge({"a": {"b": 1}}, {"a": 5}) == {"a": 5}


# ── Sources ───────────────────────────────────────────────────────────────


class TestYaml:
    def test_no_path_is_empty(self):
        assert load_yaml_config(None) == {}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_yaml_config(tmp_path / "missing.yaml")

    def test_empty_file_is_empty(self, tmp_path):
        assert load_yaml_config(write_yaml(tmp_path, "")) == {}

    def test_reads_sections(self, tmp_path):
        path = write_yaml(tmp_path, "gen:\n  locales: [en, id]\n  ref_locale: id\n")
        config = load_config(config_path=path)
        assert config.gen.locales == ["en", "id"]
        assert config.gen.ref_locale == "id"


class TestEnv:
    def test_gen_overrides(self, monkeypatch):
        monkeypatch.setenv("LOKAT_IN", "src/locales")
        monkeypatch.setenv("LOKAT_OUT", "build/i18n")
        monkeypatch.setenv("LOKAT_LOCALES", "en,id")
        monkeypatch.setenv("LOKAT_REF", "id")

        overrides = load_env_overrides()

        assert overrides == {
            "gen": {
                "input_dir": "src/locales",
                "output_dir": "build/i18n",
                "locales": "en,id",
                "ref_locale": "id",
            }
        }

    def test_log_level_lowercased(self, monkeypatch):
        monkeypatch.setenv("LOKAT_LOG_LEVEL", "DEBUG")
        assert load_env_overrides() == {"logging": {"level": "debug"}}

    def test_nothing_set(self):
        assert load_env_overrides() == {}


class TestCliOverrides:
    def test_none_values_ignored(self):
        merged = apply_cli_overrides({"gen": {"locales": ["en"]}}, {"locales": None, "input_dir": None})
        assert merged == {"gen": {"locales": ["en"]}}

    def test_zero_verbose_count_keeps_yaml_value(self, tmp_path):
        path = write_yaml(tmp_path, "logging:\n  verbose: 2\n")

        config = load_config(config_path=path, cli_args={"verbose": 0})

        assert config.logging.verbose == 2

    def test_verbose_flag_overrides_yaml(self, tmp_path):
        path = write_yaml(tmp_path, "logging:\n  verbose: 2\n")

        config = load_config(config_path=path, cli_args={"verbose": 1})

        assert config.logging.verbose == 1

    def test_maps_flags_to_sections(self):
        merged = apply_cli_overrides(
            {},
            {
                "input_dir": Path("in"),
                "output_dir": Path("out"),
                "locales": "en,id",
                "ref_locale": "id",
                "language": "es",
                "log_file": Path("logs/lokat.jsonl"),
                "verbose": 2,
            },
        )
        assert merged["gen"] == {
            "input_dir": Path("in"),
            "output_dir": Path("out"),
            "locales": "en,id",
            "ref_locale": "id",
        }
        assert merged["language"] == "es"
        assert merged["logging"] == {"file": Path("logs/lokat.jsonl"), "verbose": 2}


class TestPrecedence:
    def test_yaml_then_env_then_cli(self, tmp_path, monkeypatch):
        path = write_yaml(
            tmp_path,
            "gen:\n  input_dir: from-yaml\n  output_dir: from-yaml\n  locales: [en]\n",
        )
        monkeypatch.setenv("LOKAT_OUT", "from-env")
        monkeypatch.setenv("LOKAT_LOCALES", "en,fr")

        config = load_config(config_path=path, cli_args={"locales": "en,id"})

        assert config.gen.input_dir == Path("from-yaml")
        assert config.gen.output_dir == Path("from-env")
        assert config.gen.locales == ["en", "id"]

    def test_defaults(self):
        config = load_config()
        assert config.language == "en"
        assert config.gen.input_dir == Path("./locales")
        assert config.gen.locales == ["en"]
        assert config.gen.ref_locale == "en"
        assert config.logging.level == "human"
        assert config.runtime.key_strategy == "value"


# ── Schema ────────────────────────────────────────────────────────────────


class TestSchema:
    def test_locales_string_split(self):
        assert GenConfig(locales=" en, id ,,fr").locales == ["en", "id", "fr"]

    def test_ref_defaults_to_first_locale(self):
        assert GenConfig(locales=["id", "en"]).ref_locale == "id"

    def test_explicit_ref_kept(self):
        assert GenConfig(locales=["en", "id"], ref_locale="id").ref_locale == "id"

    def test_no_locales_means_no_ref(self):
        cfg = GenConfig(locales="")
        assert cfg.locales == []
        assert cfg.ref_locale is None

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            AppConfig(gen={"input": "typo"})

    def test_runtime_bounds(self):
        with pytest.raises(ValidationError):
            RuntimeConfig(http_timeout=0)
        with pytest.raises(ValidationError):
            RuntimeConfig(key_strategy="reference")

    def test_runtime_kwargs(self, tmp_path):
        path = write_yaml(
            tmp_path,
            "runtime:\n  key_strategy: identity\n  http_timeout: 2.5\n  http_retries: 3\n",
        )
        runtime = load_config(config_path=path).runtime
        assert runtime.switcher_kwargs() == {"disable_cache": False, "key_strategy": "identity"}
        assert runtime.http_kwargs() == {"timeout": 2.5, "retries": 3}

    def test_invalid_yaml_value_raises_validation_error(self, tmp_path):
        path = write_yaml(tmp_path, "logging:\n  level: loud\n")
        with pytest.raises(ValidationError):
            load_config(config_path=path)
