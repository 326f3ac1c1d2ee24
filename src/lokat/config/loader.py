"""
Configuration loader with deep merge.

Precedence order (lowest to highest):
1. Defaults (defined in the Pydantic schemas)
2. YAML file
3. Environment variables
4. CLI arguments

The merge is recursive to preserve all keys at every level.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from .schema import AppConfig


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursive dictionary merge.

    Returns:
        New dictionary. Override wins on leaf conflicts.

    Example:
        >>> base = {"a": {"b": 1, "c": 2}, "d": 3}
        >>> override = {"a": {"b": 99}, "e": 4}
        >>> deep_merge(base, override)
        {'a': {'b': 99, 'c': 2}, 'd': 3, 'e': 4}
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(config_path: Path | None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Returns:
        The parsed mapping, or an empty dict if there is no file.

    Raises:
        FileNotFoundError: If config_path does not exist.
    """
    if not config_path:
        return {}

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def load_env_overrides() -> dict[str, Any]:
    """Load overrides from environment variables.

    Supported variables:
        LOKAT_IN:        overrides gen.input_dir
        LOKAT_OUT:       overrides gen.output_dir
        LOKAT_LOCALES:   overrides gen.locales (comma-separated)
        LOKAT_REF:       overrides gen.ref_locale
        LOKAT_LOG_LEVEL: overrides logging.level
        LOKAT_LANGUAGE:  overrides language
    """
    overrides: dict[str, Any] = {}

    if input_dir := os.environ.get("LOKAT_IN"):
        overrides.setdefault("gen", {})["input_dir"] = input_dir

    if output_dir := os.environ.get("LOKAT_OUT"):
        overrides.setdefault("gen", {})["output_dir"] = output_dir

    if locales := os.environ.get("LOKAT_LOCALES"):
        overrides.setdefault("gen", {})["locales"] = locales

    if ref := os.environ.get("LOKAT_REF"):
        overrides.setdefault("gen", {})["ref_locale"] = ref

    if log_level := os.environ.get("LOKAT_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level.lower()

    if language := os.environ.get("LOKAT_LANGUAGE"):
        overrides["language"] = language.lower()

    return overrides


def apply_cli_overrides(config_dict: dict[str, Any], cli_args: dict[str, Any]) -> dict[str, Any]:
    """Apply overrides from CLI arguments (None, or a zero -v count, means "not given")."""
    overrides: dict[str, Any] = {}

    if cli_args.get("input_dir"):
        overrides.setdefault("gen", {})["input_dir"] = cli_args["input_dir"]

    if cli_args.get("output_dir"):
        overrides.setdefault("gen", {})["output_dir"] = cli_args["output_dir"]

    if cli_args.get("locales"):
        overrides.setdefault("gen", {})["locales"] = cli_args["locales"]

    if cli_args.get("ref_locale"):
        overrides.setdefault("gen", {})["ref_locale"] = cli_args["ref_locale"]

    if cli_args.get("language"):
        overrides["language"] = cli_args["language"]

    if cli_args.get("log_file"):
        overrides.setdefault("logging", {})["file"] = cli_args["log_file"]

    if cli_args.get("verbose"):
        overrides.setdefault("logging", {})["verbose"] = cli_args["verbose"]

    return deep_merge(config_dict, overrides)


def load_config(
    config_path: Path | None = None,
    cli_args: dict[str, Any] | None = None,
) -> AppConfig:
    """Load and validate the complete application configuration.

    Raises:
        FileNotFoundError: If config_path does not exist.
        ValidationError: If the final configuration is not valid.
    """
    cli_args = cli_args or {}

    # 1. Defaults come from Pydantic (AppConfig())
    # 2. Load YAML
    yaml_config = load_yaml_config(config_path)

    # 3. Merge with env vars
    env_overrides = load_env_overrides()
    merged = deep_merge(yaml_config, env_overrides)

    # 4. Merge with CLI args
    merged = apply_cli_overrides(merged, cli_args)

    # 5. Validate with Pydantic (this applies defaults automatically)
    return AppConfig(**merged)
