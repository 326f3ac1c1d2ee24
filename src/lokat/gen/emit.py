"""
Emitter — Writes the validated keyspace as importable Python modules.

Per namespace, <out>/<module>.py contains:
- class <Ns>K(IntEnum): symbolic key name -> integer id
- KEYS: original key names in canonical order
- <NS>_<LOCALE>: one tuple of localized strings per locale, indexed by id

<out>/__init__.py imports every namespace module and lists LOCALES.

Emission is best-effort: it runs even when validation reported issues.
A locale lacking a key (or the whole namespace) gets the reference string at
that position, so all arrays of a namespace have the same length.

Output is deterministic for a given layout and result.
"""

import keyword
import re
from pathlib import Path

import structlog

from ..logging.human import HumanLog
from .types import GenerateResult, Layout

logger = structlog.get_logger()
_hlog = HumanLog()

__all__ = [
    "emit_all",
    "render_namespace",
    "render_package",
    "format_enum_name",
    "const_name_for",
    "member_name_for",
    "module_name_for",
]

_HEADER = '"""Generated by lokat gen. Do not edit."""\n'
_NON_IDENT = re.compile(r"[^0-9A-Za-z]+")
_WORD_SPLIT = re.compile(r"[\s._-]+")


def _title_case(ns: str) -> str:
    return "".join(p[0].upper() + p[1:].lower() for p in _WORD_SPLIT.split(ns) if p)


def format_enum_name(ns: str) -> str:
    """Enum class name for a namespace: "user-profile" -> "UserProfileK"."""
    name = _NON_IDENT.sub("", _title_case(ns)) or "Ns"
    if name[0].isdigit():
        name = f"Ns{name}"
    return f"{name}K"


def const_name_for(ns: str, locale: str) -> str:
    """Array constant name: ("common", "pt-BR") -> "COMMON_PT_BR"."""
    return _upper_ident(f"{ns}_{locale}")


def member_name_for(key: str) -> str:
    """Enum member name for a key: "home.title" -> "HOME_TITLE"."""
    return _upper_ident(key) or "KEY"


def module_name_for(ns: str) -> str:
    """Module name for a namespace: "User-Profile" -> "user_profile"."""
    name = _NON_IDENT.sub("_", ns).strip("_").lower() or "ns"
    if name[0].isdigit() or keyword.iskeyword(name):
        name = f"ns_{name}"
    return name


def _upper_ident(text: str) -> str:
    name = _NON_IDENT.sub("_", text).strip("_").upper()
    if name and name[0].isdigit():
        name = f"K_{name}"
    return name


def _unique(names: list[str]) -> list[str]:
    """Suffix repeats with _2, _3, ... skipping any name already taken."""
    taken: set[str] = set()
    result = []
    for name in names:
        candidate = name
        suffix = 1
        while candidate in taken:
            suffix += 1
            candidate = f"{name}_{suffix}"
        taken.add(candidate)
        result.append(candidate)
    return result


def render_namespace(ns: str, layout: Layout, result: GenerateResult) -> str:
    """Render the module source for one namespace."""
    keys = result.order_by_ns[ns]
    ref = layout.locales[result.ref_locale][ns]
    enum_name = format_enum_name(ns)
    members = _unique([member_name_for(k) for k in keys])
    consts = _unique([const_name_for(ns, loc) for loc in layout.locales])

    exports = [enum_name, "KEYS", *consts]
    lines = [_HEADER, "from enum import IntEnum", ""]
    lines.append(f"__all__ = [{', '.join(repr(e) for e in exports)}]")
    lines += ["", "", f"class {enum_name}(IntEnum):"]
    if members:
        lines += [f"    {member} = {index}" for index, member in enumerate(members)]
    else:
        lines.append("    pass")

    lines += ["", "", *_tuple_lines("KEYS", keys)]
    for locale, const in zip(layout.locales, consts):
        dictionary = layout.locales[locale].get(ns, {})
        values = [dictionary.get(k, ref[k]) for k in keys]
        lines += ["", f"# {locale}", *_tuple_lines(const, values)]
    return "\n".join(lines) + "\n"


def _tuple_lines(name: str, values: list[str] | tuple[str, ...]) -> list[str]:
    if not values:
        return [f"{name}: tuple[str, ...] = ()"]
    return [f"{name}: tuple[str, ...] = (", *(f"    {v!r}," for v in values), ")"]


def render_package(modules: dict[str, str], locales: list[str]) -> str:
    """Render <out>/__init__.py for namespace -> module name."""
    names = sorted(modules.values())
    exports = ["LOCALES", "NAMESPACES", *names]
    lines = [_HEADER]
    if names:
        lines.append(f"from . import {', '.join(names)}")
        lines.append("")
    lines.append(f"LOCALES: tuple[str, ...] = {tuple(locales)!r}")
    lines.append(f"NAMESPACES: dict[str, str] = {dict(sorted(modules.items()))!r}")
    lines.append("")
    lines.append(f"__all__ = {exports!r}")
    return "\n".join(lines) + "\n"


def emit_all(output_dir: Path | str, layout: Layout, result: GenerateResult) -> list[Path]:
    """Write one module per namespace plus the package __init__.

    Args:
        output_dir: Target directory (created if missing).
        layout: Loaded locale files.
        result: Output of validate_and_order() for this layout.

    Returns:
        Paths written, in write order.
    """
    out = Path(output_dir)
    log = logger.bind(component="emitter", output_dir=str(out))
    out.mkdir(parents=True, exist_ok=True)

    module_names = _unique([module_name_for(ns) for ns in result.namespaces])
    modules = dict(zip(result.namespaces, module_names))
    written: list[Path] = []
    for ns, module in modules.items():
        path = out / f"{module}.py"
        path.write_text(render_namespace(ns, layout, result), encoding="utf-8")
        written.append(path)
        log.debug("gen.emit.module", namespace=ns, path=str(path), keys=len(result.order_by_ns[ns]))

    init = out / "__init__.py"
    init.write_text(render_package(modules, list(layout.locales)), encoding="utf-8")
    written.append(init)

    log.info("gen.emit.complete", files=len(written))
    _hlog.emitted(output_dir=str(out), files=len(written))
    return written
