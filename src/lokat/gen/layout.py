"""
Layout loader — Reads per-locale, per-namespace JSON dictionaries from disk.

Two directory conventions are supported, probed per locale:

1. Nested: <input>/<locale>/<namespace>.json
2. Flat:   <input>/<locale>.<namespace>.json

The nested convention wins whenever it yields at least one file for the
locale; the two are never merged. A locale matching neither convention gets
an empty namespace map (validation reports it).

Any unreadable or malformed file aborts the whole load; no partial layout is
returned.
"""

import json
from pathlib import Path

import structlog

from ..errors import MalformedInputError
from ..logging.human import HumanLog
from .types import Layout, LocaleDict

logger = structlog.get_logger()
_hlog = HumanLog()

__all__ = ["load_layout", "read_locale_file"]

_SUFFIX = ".json"


def load_layout(input_dir: Path | str, locales: list[str]) -> Layout:
    """Load every requested locale from `input_dir`.

    Args:
        input_dir: Directory holding the locale files.
        locales: Locale codes, in the order the layout should list them.

    Returns:
        Layout with one entry per requested locale.

    Raises:
        MalformedInputError: If `input_dir` is missing or any file cannot be
            read, is not valid JSON, or is not a flat string dictionary.
    """
    root = Path(input_dir)
    log = logger.bind(component="layout_loader", input_dir=str(root))
    if not root.is_dir():
        raise MalformedInputError(root, "input directory not found")

    layout = Layout()
    total_files = 0
    for locale in locales:
        namespaces = _probe_nested(root, locale)
        convention = "nested"
        if not namespaces:
            namespaces = _probe_flat(root, locale)
            convention = "flat"

        layout.locales[locale] = {ns: read_locale_file(path) for ns, path in namespaces}
        total_files += len(namespaces)
        log.debug(
            "gen.layout.locale",
            locale=locale,
            convention=convention if namespaces else None,
            namespaces=[ns for ns, _ in namespaces],
        )

    log.info("gen.layout.loaded", locales=len(locales), files=total_files)
    _hlog.layout_loaded(locales=len(locales), files=total_files)
    return layout


def _probe_nested(root: Path, locale: str) -> list[tuple[str, Path]]:
    nested = root / locale
    if not nested.is_dir():
        return []
    return [
        (path.name[: -len(_SUFFIX)], path)
        for path in _list_dir(nested)
        if path.name.endswith(_SUFFIX) and path.is_file()
    ]


def _probe_flat(root: Path, locale: str) -> list[tuple[str, Path]]:
    prefix = f"{locale}."
    found = []
    for path in _list_dir(root):
        name = path.name
        if not (name.startswith(prefix) and name.endswith(_SUFFIX) and path.is_file()):
            continue
        namespace = name[len(prefix): -len(_SUFFIX)]
        if namespace:
            found.append((namespace, path))
    return found


def _list_dir(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as e:
        raise MalformedInputError(directory, f"unreadable: {e}") from e


def read_locale_file(path: Path) -> LocaleDict:
    """Read one namespace file as a flat, ordered string dictionary.

    Raises:
        MalformedInputError: On I/O, encoding or JSON errors, or if the
            document is not an object of string values.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedInputError(path, f"unreadable: {e}") from e
    except json.JSONDecodeError as e:
        raise MalformedInputError(path, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedInputError(path, f"expected a JSON object, got {type(data).__name__}")
    for key, value in data.items():
        if not isinstance(value, str):
            raise MalformedInputError(
                path,
                f"value of '{key}' must be a string, got {type(value).__name__}",
            )
    return data
