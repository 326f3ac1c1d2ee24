"""
Keyspace generation - Load, validate and emit compiled locale dictionaries.

Public API:
    load_layout(input_dir, locales)     — Read locale JSON files into a Layout.
    validate_and_order(layout, ref)     — Canonical key order + issues.
    emit_all(output_dir, layout, res)   — Write Python modules.
    generate(options)                   — All three, emission always runs.
"""

from .emit import const_name_for, emit_all, format_enum_name, member_name_for, module_name_for
from .layout import load_layout
from .types import (
    GenerateOptions,
    GenerateResult,
    IssueKind,
    Layout,
    LocaleDict,
    ValidationIssue,
)
from .validate import validate_and_order

__all__ = [
    "GenerateOptions",
    "GenerateResult",
    "IssueKind",
    "Layout",
    "LocaleDict",
    "ValidationIssue",
    "const_name_for",
    "emit_all",
    "format_enum_name",
    "generate",
    "load_layout",
    "member_name_for",
    "module_name_for",
    "validate_and_order",
]


def generate(options: GenerateOptions) -> GenerateResult:
    """Run a full generation: load, validate, emit.

    Artifacts are emitted even when validation reports issues; inspect
    `result.issues` (or `result.ok`) to decide whether that is a failure.

    Raises:
        MalformedInputError: If an input file cannot be loaded.
        ReferenceLocaleMissingError: If the reference locale has no entry.
    """
    layout = load_layout(options.input_dir, options.locales)
    result = validate_and_order(layout, options.ref_locale or "")
    emit_all(options.output_dir, layout, result)
    return result
