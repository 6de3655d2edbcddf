"""Read-only view over the raw ASGI header pairs.

Names compare case-insensitively; values decode as latin-1 on access.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Request headers as a case-insensitive mapping.

    Lookup by name yields the first value sent; ``get_list`` yields them all.
    """

    __slots__ = ("_pairs",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._pairs = tuple((name.lower(), value) for name, value in raw)

    def get_list(self, key: str) -> list[str]:
        wanted = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._pairs if name == wanted]

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self.get_list(key)
        return values[0] if values else default

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(self.get_list(key))

    def __iter__(self) -> Iterator[str]:
        names = dict.fromkeys(name.decode("latin-1") for name, _ in self._pairs)
        return iter(names)

    def __len__(self) -> int:
        return len({name for name, _ in self._pairs})

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"
