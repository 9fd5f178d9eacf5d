"""Immutable, case-insensitive HTTP header list.

Stores raw byte pairs exactly as ASGI and httpx exchange them and
decodes on access. Order and duplicates are preserved, which a proxy
needs to pass ``Set-Cookie`` and friends through untouched.
"""

from collections.abc import Iterable, Iterator, Mapping


def _key(name: str | bytes) -> bytes:
    if isinstance(name, str):
        name = name.encode("latin-1")
    return name.lower()


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value; ``get_list``
    returns all of them. Transformations (``replacing``, ``appending``,
    ``without``) return new ``Headers``.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        object.__setattr__(self, "_raw", tuple(raw))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "Headers":
        """Build from ``(name, value)`` string pairs."""
        return cls((name.encode("latin-1"), value.encode("latin-1")) for name, value in pairs)

    def __getitem__(self, key: str) -> str:
        key_lower = _key(key)
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = _key(key)
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
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
        """Return all values for *key*, in order."""
        key_lower = _key(key)
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    # -- Transformations --

    def replacing(self, name: str, value: str) -> "Headers":
        """Drop every *name* header and append a single new value."""
        return self.without(name).appending(name, value)

    def appending(self, name: str, value: str) -> "Headers":
        """Add a value after any existing ones."""
        return Headers((*self._raw, (_key(name), value.encode("latin-1"))))

    def without(self, *names: str) -> "Headers":
        """Drop every header whose name is in *names* (case-insensitive)."""
        drop = {_key(name) for name in names}
        return Headers(pair for pair in self._raw if pair[0].lower() not in drop)

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Raw header byte pairs for ASGI and httpx."""
        return self._raw
