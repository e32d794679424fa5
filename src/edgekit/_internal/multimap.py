"""Ordered multi-valued string mapping shared by Headers, QueryParams, FormData.

Stores decoded ``(key, value)`` pairs in arrival order. Subclasses choose
how keys compare through ``_fold`` (headers fold case, query and form
keys do not).
"""

from collections.abc import Iterable, Iterator, Mapping


class MultiMap(Mapping[str, str]):
    """A read-only string mapping where keys can have multiple values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    ``items_list`` returns every pair in arrival order.
    """

    __slots__ = ("_pairs",)

    _pairs: tuple[tuple[str, str], ...]

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        object.__setattr__(self, "_pairs", tuple((self._fold(k), v) for k, v in pairs))

    @staticmethod
    def _fold(key: str) -> str:
        return key

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        folded = self._fold(key)
        for name, value in self._pairs:
            if name == folded:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        folded = self._fold(key)
        return any(name == folded for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._pairs))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._pairs)
        return f"{type(self).__name__}([{items}])"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* in arrival order."""
        folded = self._fold(key)
        return [value for name, value in self._pairs if name == folded]

    def items_list(self) -> list[tuple[str, str]]:
        return list(self._pairs)
