"""
Translators — Reboundable lookup callables over a dictionary snapshot.

Two keyspaces:
- KeyedTranslator:   t("home.title") -> value, or the key itself on a miss
- IndexedTranslator: t(0) -> value, or ABSENT when the id is out of range

Neither raises on a miss. The translator object is the single indirection
point: callers keep one reference and rebind() swaps the snapshot every
subsequent call reads.
"""

from collections.abc import Callable, Mapping, Sequence

__all__ = [
    "ABSENT",
    "IndexedTranslator",
    "KeyedTranslator",
    "create_t",
]


class _Absent:
    """Sentinel returned by an indexed lookup with no matching entry."""

    __slots__ = ()
    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


class KeyedTranslator:
    """String-keyed lookup with fallback to the key.

    Usage:
        t = KeyedTranslator({"a.b": "ok"})
        t("a.b")      # "ok"
        t("missing")  # "missing"
        t.rebind({"a.b": "oke"})
        t("a.b")      # "oke"
    """

    __slots__ = ("_dictionary",)

    def __init__(self, dictionary: Mapping[str, str] | None = None) -> None:
        self._dictionary: Mapping[str, str] = {} if dictionary is None else dictionary

    def __call__(self, key: str) -> str:
        value = self._dictionary.get(key)
        return key if value is None else value

    def rebind(self, dictionary: Mapping[str, str]) -> None:
        """Swap the snapshot read by subsequent calls."""
        self._dictionary = dictionary

    @property
    def dictionary(self) -> Mapping[str, str]:
        """The snapshot currently bound."""
        return self._dictionary

    def __repr__(self) -> str:
        return f"KeyedTranslator(keys={len(self._dictionary)})"


class IndexedTranslator:
    """Integer-keyed lookup over a compiled keyspace, without fallback.

    Ids are positions assigned at generation time. Negative ids do not wrap
    around; they are out of range like any id past the end.

    Usage:
        t = IndexedTranslator(("OK", "Cancel"))
        t(0)  # "OK"
        t(5)  # ABSENT
    """

    __slots__ = ("_strings",)

    def __init__(self, strings: Sequence[str] | None = None) -> None:
        self._strings: Sequence[str] = () if strings is None else strings

    def __call__(self, id: int) -> "str | _Absent":
        if id < 0:
            return ABSENT
        try:
            return self._strings[id]
        except IndexError:
            return ABSENT

    def rebind(self, strings: Sequence[str]) -> None:
        """Swap the snapshot read by subsequent calls."""
        self._strings = strings

    @property
    def strings(self) -> Sequence[str]:
        """The snapshot currently bound."""
        return self._strings

    def __repr__(self) -> str:
        return f"IndexedTranslator(size={len(self._strings)})"


def create_t(dictionary: Mapping[str, str]) -> Callable[[str], str]:
    """Return a plain keyed lookup bound to `dictionary` (not reboundable)."""
    get = dictionary.get

    def t(key: str) -> str:
        value = get(key)
        return key if value is None else value

    return t
