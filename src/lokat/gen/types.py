"""
Data model for keyspace generation.

Layout:          locale -> namespace -> flat dictionary (insertion order kept)
GenerateResult:  sorted namespaces, canonical key order per namespace, issues
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType

__all__ = [
    "GenerateOptions",
    "GenerateResult",
    "IssueKind",
    "Layout",
    "LocaleDict",
    "ValidationIssue",
]

LocaleDict = dict[str, str]


@dataclass
class Layout:
    """In-memory view of the input locale files.

    Locale order is the order locales were requested in. Each namespace
    dictionary keeps the key order of its JSON file.
    """

    locales: dict[str, dict[str, LocaleDict]] = field(default_factory=dict)

    def namespaces_of(self, locale: str) -> list[str]:
        return sorted(self.locales.get(locale, {}))

    def __contains__(self, locale: object) -> bool:
        return locale in self.locales


class IssueKind(Enum):
    """Structural mismatch found for a (locale, namespace) pair."""

    MISSING_NAMESPACE = "missing_namespace"
    KEY_COUNT_MISMATCH = "key_count_mismatch"
    KEY_ORDER_MISMATCH = "key_order_mismatch"


@dataclass(frozen=True)
class ValidationIssue:
    """One non-fatal validation finding.

    Attributes:
        locale: Locale that deviates from the reference.
        namespace: Namespace the issue belongs to.
        kind: Issue category.
        message: Human-readable description.
        index: Mismatch position (KEY_ORDER_MISMATCH only).
        got: Key (or count) found in `locale`.
        expected: Key (or count) found in the reference locale.
    """

    locale: str
    namespace: str
    kind: IssueKind
    message: str
    index: int | None = None
    got: str | int | None = None
    expected: str | int | None = None

    def __str__(self) -> str:
        return f"[{self.locale}/{self.namespace}] {self.message}"

    def to_dict(self) -> dict[str, object]:
        return {
            "locale": self.locale,
            "namespace": self.namespace,
            "kind": self.kind.value,
            "message": self.message,
            "index": self.index,
            "got": self.got,
            "expected": self.expected,
        }


@dataclass(frozen=True)
class GenerateResult:
    """Output of validate_and_order(); immutable once computed.

    Attributes:
        ref_locale: Locale whose key order defines the integer ids.
        namespaces: Namespaces of the reference locale, sorted.
        order_by_ns: Canonical key order per namespace (position = id).
        issues: Findings in discovery order (namespace, then locale).
    """

    ref_locale: str
    namespaces: tuple[str, ...]
    order_by_ns: Mapping[str, tuple[str, ...]]
    issues: tuple[ValidationIssue, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.order_by_ns, MappingProxyType):
            object.__setattr__(self, "order_by_ns", MappingProxyType(dict(self.order_by_ns)))

    @property
    def ok(self) -> bool:
        """True if no issue was found."""
        return not self.issues

    def to_dict(self) -> dict[str, object]:
        return {
            "ref_locale": self.ref_locale,
            "namespaces": list(self.namespaces),
            "order_by_ns": {ns: list(keys) for ns, keys in self.order_by_ns.items()},
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class GenerateOptions:
    """Inputs of an end-to-end generation run."""

    input_dir: Path
    output_dir: Path
    locales: list[str]
    ref_locale: str | None = None

    def __post_init__(self) -> None:
        self.input_dir = Path(self.input_dir)
        self.output_dir = Path(self.output_dir)
        if self.ref_locale is None and self.locales:
            self.ref_locale = self.locales[0]
