"""Case-insensitive lookup over raw ASGI header pairs.

Used on the request side to capture every ``Cookie`` header before the
inner app runs, and by the test client to read response headers.
"""

from collections.abc import Iterable


class Headers:
    """Immutable header pairs, matched by name without regard to case.

    Repeated headers are kept in arrival order; ``Cookie`` and
    ``Set-Cookie`` both rely on that.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        self._raw = tuple((bytes(k), bytes(v)) for k, v in raw)

    def __getitem__(self, key: str) -> str:
        values = self.get_list(key)
        if not values:
            raise KeyError(key)
        return values[0]

    def get_list(self, key: str) -> list[str]:
        """Return every value for *key*, decoded as latin-1."""
        return [value.decode("latin-1") for value in self.get_raw_list(key)]

    def get_raw_list(self, key: str) -> list[bytes]:
        """Return every raw value for *key*, in the order received."""
        key_lower = key.lower().encode("latin-1")
        return [value for name, value in self._raw if name.lower() == key_lower]
