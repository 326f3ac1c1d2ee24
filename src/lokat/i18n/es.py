"""
Spanish language strings for the lokat CLI.

Must have the same keys as en.py (canonical).
"""

STRINGS: dict[str, str] = {
    # ── Human Formatter: progreso de la generación ──────────────────────
    "human.layout_loaded": "📂 Cargado{s} {files} archivo{s} de locale para {locales} locale{ls}",
    "human.validated_ok": "✓ {namespaces} namespace{s} validado{s}, sin problemas",
    "human.validated_issues": "⚠️  {namespaces} namespace{s} validado{s}, {issues} problema{is_}",
    "human.emitted": "✓ Escrito{s} {files} archivo{s} en {output_dir}",
    # ── Problemas de validación ─────────────────────────────────────────
    "issue.line": "- [{locale}/{namespace}] {message}",
    "issue.missing_namespace": "Falta el namespace",
    "issue.key_count_mismatch": "Número de claves distinto: hay {got}, se esperaban {expected}",
    "issue.key_order_mismatch": "Orden distinto en el índice {index}: '{got}' frente a '{expected}'",
    # ── CLI ─────────────────────────────────────────────────────────────
    "cli.issues_header": "Se detectaron problemas de validación:",
    "cli.no_issues": "Sin problemas de validación",
    "cli.generated_to": "Generado en: {path}",
    "cli.no_locales": "No se indicaron locales (usa --locales o gen.locales en el archivo de configuración)",
    "cli.error": "Error: {error}",
    "cli.config_valid": "Configuración válida",
    "cli.config_invalid": "Configuración inválida: {error}",
    "cli.config_input": "  Entrada:     {value}",
    "cli.config_output": "  Salida:      {value}",
    "cli.config_locales": "  Locales:     {value}",
    "cli.config_ref": "  Referencia:  {value}",
}
