"""Query string parameters."""

from urllib.parse import parse_qsl

from edgekit._internal.multimap import MultiMap


class QueryParams(MultiMap):
    """Immutable, multi-valued query string parameters.

    ``to_dict`` returns the flat mapping the extractor validates: a
    repeated key keeps its last value, matching what browsers'
    ``URLSearchParams`` produce when collapsed into an object.
    """

    __slots__ = ()

    @classmethod
    def parse(cls, query_string: bytes | str) -> "QueryParams":
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        return cls(parse_qsl(query_string, keep_blank_values=True))

    def to_dict(self) -> dict[str, str]:
        return dict(self._pairs)
