"""
Validator / Orderer — Canonical key order and cross-locale consistency.

The reference locale defines the schema:
- Its namespaces (and only its namespaces) are validated and generated.
  A namespace present only in other locales is ignored silently.
- Its key insertion order per namespace is the canonical order; position
  in that order is the integer id assigned by the emitter.

Every locale (reference included, in layout order) is checked against it:
1. Namespace missing   -> one MISSING_NAMESPACE issue, nothing else checked
2. Key count differs   -> one KEY_COUNT_MISMATCH issue, order still checked
3. First position whose key differs -> one KEY_ORDER_MISMATCH issue, stop

Pure function: the layout is never mutated.
"""

import structlog

from ..errors import ReferenceLocaleMissingError
from ..logging.human import HumanLog
from .types import GenerateResult, IssueKind, Layout, ValidationIssue

logger = structlog.get_logger()
_hlog = HumanLog()

__all__ = ["validate_and_order"]


def validate_and_order(layout: Layout, ref_locale: str) -> GenerateResult:
    """Derive canonical key orders from `ref_locale` and check every locale.

    Args:
        layout: Loaded locale files.
        ref_locale: Locale whose namespaces and key order are canonical.

    Returns:
        GenerateResult with sorted namespaces, the order per namespace and
        all issues in discovery order.

    Raises:
        ReferenceLocaleMissingError: If `ref_locale` is not in the layout.
    """
    log = logger.bind(component="validator", ref_locale=ref_locale)
    ref = layout.locales.get(ref_locale)
    if ref is None:
        raise ReferenceLocaleMissingError(ref_locale)

    namespaces = tuple(layout.namespaces_of(ref_locale))
    order_by_ns: dict[str, tuple[str, ...]] = {}
    issues: list[ValidationIssue] = []

    for ns in namespaces:
        ref_keys = tuple(ref[ns])
        order_by_ns[ns] = ref_keys
        for locale, ns_map in layout.locales.items():
            found = _check_pair(locale, ns, ns_map.get(ns), ref_keys)
            for issue in found:
                log.debug("gen.validate.issue", **issue.to_dict())
            issues.extend(found)

    log.info("gen.validate.complete", namespaces=len(namespaces), issues=len(issues))
    _hlog.validated(namespaces=len(namespaces), issues=len(issues))
    return GenerateResult(
        ref_locale=ref_locale,
        namespaces=namespaces,
        order_by_ns=order_by_ns,
        issues=tuple(issues),
    )


def _check_pair(
    locale: str,
    ns: str,
    dictionary: dict[str, str] | None,
    ref_keys: tuple[str, ...],
) -> list[ValidationIssue]:
    if dictionary is None:
        return [
            ValidationIssue(
                locale=locale,
                namespace=ns,
                kind=IssueKind.MISSING_NAMESPACE,
                message="Missing namespace",
            )
        ]

    found: list[ValidationIssue] = []
    keys = list(dictionary)
    if len(keys) != len(ref_keys):
        found.append(
            ValidationIssue(
                locale=locale,
                namespace=ns,
                kind=IssueKind.KEY_COUNT_MISMATCH,
                message=f"Key count mismatch: got {len(keys)}, expected {len(ref_keys)}",
                got=len(keys),
                expected=len(ref_keys),
            )
        )

    for index, expected in enumerate(ref_keys):
        got = keys[index] if index < len(keys) else None
        if got != expected:
            found.append(
                ValidationIssue(
                    locale=locale,
                    namespace=ns,
                    kind=IssueKind.KEY_ORDER_MISMATCH,
                    message=f"Order mismatch at index {index}: '{got}' vs '{expected}'",
                    index=index,
                    got=got,
                    expected=expected,
                )
            )
            break
    return found
