"""Case-insensitive request headers, decoded once from the ASGI scope."""

from edgekit._internal.multimap import MultiMap


class Headers(MultiMap):
    """Immutable, case-insensitive HTTP headers.

    Keys are stored lower-cased, so iteration yields the lower-cased
    names handlers receive in ``ctx.headers``.
    """

    __slots__ = ()

    @staticmethod
    def _fold(key: str) -> str:
        return key.lower()

    @classmethod
    def from_raw(cls, raw: tuple[tuple[bytes, bytes], ...]) -> "Headers":
        """Build from ASGI ``(name, value)`` byte pairs."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    def to_dict(self) -> dict[str, str]:
        """Flatten to ``name -> value``; repeated headers are joined with ``", "``."""
        return {key: ", ".join(self.get_list(key)) for key in self}

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Encode back to ASGI byte pairs."""
        return [(k.encode("latin-1"), v.encode("latin-1")) for k, v in self._pairs]
