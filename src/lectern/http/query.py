"""Query string parameters for controllers.

Controllers read them through ``self.request.query``::

    page = self.request.query.get_int("page", 1)
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Read-only view of a parsed query string.

    Indexing returns the first value sent for a name; ``get_list``
    returns all of them in order. Blank values are kept.
    """

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string
        self._data: dict[str, list[str]] = parse_qs(
            query_string.decode("latin-1"), keep_blank_values=True
        )

    @property
    def raw(self) -> bytes:
        return self._raw

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw.decode('latin-1')!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._data.get(key, ()))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """First value for *key* as an int; *default* if absent or not numeric."""
        try:
            return int(self[key])
        except (KeyError, ValueError):
            return default
