"""
English language strings (canonical) for the lokat CLI.

All keys used in i18n are defined here. The Spanish translation (es.py)
must have the same keys.
"""

STRINGS: dict[str, str] = {
    # ── Human Formatter: generation progress ────────────────────────────
    "human.layout_loaded": "📂 Loaded {files} locale file{s} for {locales} locale{ls}",
    "human.validated_ok": "✓ {namespaces} namespace{s} validated, no issues",
    "human.validated_issues": "⚠️  {namespaces} namespace{s} validated, {issues} issue{is_}",
    "human.emitted": "✓ Wrote {files} file{s} to {output_dir}",
    # ── Validation issues ───────────────────────────────────────────────
    "issue.line": "- [{locale}/{namespace}] {message}",
    "issue.missing_namespace": "Missing namespace",
    "issue.key_count_mismatch": "Key count mismatch: got {got}, expected {expected}",
    "issue.key_order_mismatch": "Order mismatch at index {index}: '{got}' vs '{expected}'",
    # ── CLI ─────────────────────────────────────────────────────────────
    "cli.issues_header": "Validation issues detected:",
    "cli.no_issues": "No validation issues",
    "cli.generated_to": "Generated to: {path}",
    "cli.no_locales": "No locales given (use --locales or gen.locales in the config file)",
    "cli.error": "Error: {error}",
    "cli.config_valid": "Valid configuration",
    "cli.config_invalid": "Invalid configuration: {error}",
    "cli.config_input": "  Input:      {value}",
    "cli.config_output": "  Output:     {value}",
    "cli.config_locales": "  Locales:    {value}",
    "cli.config_ref": "  Reference:  {value}",
}
