"""
Main CLI for lokat using Click.

Commands:
    gen              load → validate → emit (always) → report issues
    check            load → validate → report issues (nothing written)
    validate-config  validate a YAML configuration file

Exit status is non-zero when validation reported issues, so a build can
decide whether to treat them as a failure. Artifacts are written anyway.
"""

import json
import sys
from pathlib import Path
from typing import Any

import click
import structlog
from pydantic import ValidationError

from . import __version__
from .config.loader import load_config
from .config.schema import AppConfig
from .errors import GenerationError
from .gen import GenerateResult, emit_all, load_layout, validate_and_order
from .gen.types import ValidationIssue
from .i18n import set_language as _set_language
from .i18n import t
from .logging import configure_logging

logger = structlog.get_logger()

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 3


def _common_options(fn):
    """Options shared by `gen` and `check`."""
    options = [
        click.option(
            "--in", "input_dir",
            type=click.Path(path_type=Path),
            help="Input directory containing locale JSON files",
        ),
        click.option(
            "--locales",
            help="Comma-separated locale codes (e.g. en,id)",
        ),
        click.option(
            "--ref", "ref_locale",
            help="Reference locale for key order (default: first locale)",
        ),
        click.option(
            "-c", "--config",
            type=click.Path(exists=True, path_type=Path),
            help="Path to the YAML configuration file",
        ),
        click.option(
            "--lang", "language",
            type=click.Choice(["en", "es"]),
            help="Language of CLI messages",
        ),
        click.option("-v", "--verbose", count=True, help="Verbosity (-v info, -vv debug)"),
        click.option("--log-file", type=click.Path(path_type=Path), help="Write JSON logs to this file"),
        click.option("--quiet", is_flag=True, help="Only print validation issues"),
        click.option("--json", "json_output", is_flag=True, help="Print the result as JSON on stdout"),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _prepare(kwargs: dict[str, Any]) -> AppConfig:
    """Load configuration, apply language and logging. Exits on config errors."""
    try:
        config = load_config(config_path=kwargs.get("config"), cli_args=kwargs)
    except FileNotFoundError as e:
        click.echo(t("cli.error", error=e), err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except ValidationError as e:
        click.echo(t("cli.config_invalid", error=e), err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    _set_language(config.language)
    configure_logging(
        config.logging,
        json_output=kwargs.get("json_output", False),
        quiet=kwargs.get("quiet", False),
    )
    if not config.gen.locales:
        click.echo(t("cli.no_locales"), err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    return config


def _format_issue(issue: ValidationIssue) -> str:
    message = t(
        f"issue.{issue.kind.value}",
        index=issue.index,
        got=issue.got,
        expected=issue.expected,
    )
    return t("issue.line", locale=issue.locale, namespace=issue.namespace, message=message)


def _report(result: GenerateResult, json_output: bool, extra: dict[str, Any] | None = None) -> int:
    """Print issues to stderr (and the result to stdout with --json); return the exit code."""
    if result.issues:
        click.echo(t("cli.issues_header"), err=True)
        for issue in result.issues:
            click.echo(_format_issue(issue), err=True)

    if json_output:
        payload = result.to_dict()
        payload.update(extra or {})
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))

    return EXIT_FAILED if result.issues else EXIT_SUCCESS


@click.group()
@click.version_option(version=__version__, prog_name="lokat")
def main() -> None:
    """lokat - Locale dictionaries: integer keyspace generation and checks.

    Generates deterministic integer ids from JSON locale files and checks
    that every locale follows the reference locale's keys and key order.
    """


@main.command()
@_common_options
@click.option(
    "--out", "output_dir",
    type=click.Path(path_type=Path),
    help="Output directory for the generated modules",
)
def gen(**kwargs: Any) -> None:
    """Generate keyspace modules from locale JSON files.

    Artifacts are written even if validation finds issues; the exit status
    is 1 in that case.
    """
    config = _prepare(kwargs)
    gen_cfg = config.gen
    log = logger.bind(command="gen")

    try:
        layout = load_layout(gen_cfg.input_dir, gen_cfg.locales)
        result = validate_and_order(layout, gen_cfg.ref_locale or gen_cfg.locales[0])
        written = emit_all(gen_cfg.output_dir, layout, result)
    except GenerationError as e:
        log.error("gen.failed", error=str(e), error_type=type(e).__name__)
        click.echo(t("cli.error", error=e), err=True)
        sys.exit(EXIT_FAILED)

    exit_code = _report(
        result,
        kwargs.get("json_output", False),
        extra={"output_dir": str(gen_cfg.output_dir), "files": [str(p) for p in written]},
    )
    if not kwargs.get("quiet") and not kwargs.get("json_output"):
        click.echo(t("cli.generated_to", path=gen_cfg.output_dir.resolve()))
    sys.exit(exit_code)


@main.command()
@_common_options
def check(**kwargs: Any) -> None:
    """Validate locale JSON files without writing anything."""
    config = _prepare(kwargs)
    gen_cfg = config.gen
    log = logger.bind(command="check")

    try:
        layout = load_layout(gen_cfg.input_dir, gen_cfg.locales)
        result = validate_and_order(layout, gen_cfg.ref_locale or gen_cfg.locales[0])
    except GenerationError as e:
        log.error("check.failed", error=str(e), error_type=type(e).__name__)
        click.echo(t("cli.error", error=e), err=True)
        sys.exit(EXIT_FAILED)

    exit_code = _report(result, kwargs.get("json_output", False))
    if exit_code == EXIT_SUCCESS and not kwargs.get("quiet") and not kwargs.get("json_output"):
        click.echo(t("cli.no_issues"))
    sys.exit(exit_code)


@main.command()
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to the configuration file to validate",
)
def validate_config(config: Path | None) -> None:
    """Validate a YAML configuration file."""
    try:
        app_config = load_config(config_path=config)
        _set_language(app_config.language)
        click.echo(t("cli.config_valid"))
        click.echo(t("cli.config_input", value=app_config.gen.input_dir))
        click.echo(t("cli.config_output", value=app_config.gen.output_dir))
        click.echo(t("cli.config_locales", value=", ".join(app_config.gen.locales)))
        click.echo(t("cli.config_ref", value=app_config.gen.ref_locale))
    except FileNotFoundError as e:
        click.echo(t("cli.error", error=e), err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except Exception as e:
        click.echo(t("cli.config_invalid", error=e), err=True)
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()
