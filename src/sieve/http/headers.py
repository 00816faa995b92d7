"""Immutable, case-insensitive response headers.

Keeps every ``(name, value)`` pair in arrival order so repeated headers
such as ``Set-Cookie`` survive intact. Byte pairs are decoded as latin-1,
the way they came off the wire.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

type HeaderPair = tuple[str | bytes, str | bytes]


def _text(value: str | bytes) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return value


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive response headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. multiple ``Set-Cookie``).
    """

    __slots__ = ("_raw",)

    _raw: tuple[tuple[str, str], ...]

    def __init__(self, raw: Iterable[HeaderPair] | Mapping[str, str] = ()) -> None:
        pairs = raw.items() if isinstance(raw, Mapping) else raw
        object.__setattr__(self, "_raw", tuple((_text(n), _text(v)) for n, v in pairs))

    @classmethod
    def from_httpx(cls, headers: httpx.Headers) -> Headers:
        """Copy an ``httpx.Headers``, keeping repeated headers."""
        return cls(headers.multi_items())

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Headers is immutable")

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in arrival order."""
        key_lower = key.lower()
        return [value for name, value in self._raw if name.lower() == key_lower]

    def without(self, *keys: str) -> Headers:
        """Return a copy with every value of *keys* removed."""
        drop = {key.lower() for key in keys}
        return Headers(pair for pair in self._raw if pair[0].lower() not in drop)

    @property
    def raw(self) -> tuple[tuple[str, str], ...]:
        """The decoded header pairs, in arrival order."""
        return self._raw
