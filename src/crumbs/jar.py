"""Change-tracking cookie jar.

A ``CookieJar`` keeps two name-keyed sets: the *original* cookies that
arrived with the request and the *delta* of cookies added or removed
since. Only the delta is sent back to the client.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from crumbs.cookie import Cookie
from crumbs.errors import CookieParseError

logger = logging.getLogger("crumbs.jar")


class CookieJar:
    """Cookies of one request, split into originals and changes.

    Reads see the delta first, then the originals. A removed original
    stays in the delta as a removal marker so the client is told to
    delete it.
    """

    __slots__ = ("_delta", "_original", "_removed")

    def __init__(self) -> None:
        self._original: dict[str, Cookie] = {}
        self._delta: dict[str, Cookie] = {}
        # Names whose delta entry is a removal marker
        self._removed: set[str] = set()

    def add_original(self, cookie: Cookie) -> None:
        """Record *cookie* as received with the request. Not part of the delta."""
        self._original[cookie.name] = cookie

    def add(self, cookie: Cookie) -> None:
        """Add *cookie*, replacing any cookie with the same name."""
        self._delta[cookie.name] = cookie
        self._removed.discard(cookie.name)

    def remove(self, cookie: Cookie) -> None:
        """Remove *cookie*.

        If the client sent a cookie of that name, a removal marker built
        from *cookie* (so its domain and path) goes into the delta.
        Otherwise any pending change for that name is simply discarded.
        """
        if cookie.name in self._original:
            self._delta[cookie.name] = cookie.make_removal()
            self._removed.add(cookie.name)
        else:
            self._delta.pop(cookie.name, None)
            self._removed.discard(cookie.name)

    def get(self, name: str) -> Cookie | None:
        """Return the live cookie called *name*, or ``None``."""
        if name in self._removed:
            return None
        if name in self._delta:
            return self._delta[name]
        return self._original.get(name)

    def get_original(self, name: str) -> Cookie | None:
        """Return the cookie called *name* as the client sent it."""
        return self._original.get(name)

    def __iter__(self) -> Iterator[Cookie]:
        """Iterate live cookies: changes first, then untouched originals."""
        for name, cookie in self._delta.items():
            if name not in self._removed:
                yield cookie
        for name, cookie in self._original.items():
            if name not in self._delta:
                yield cookie

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def delta(self) -> Iterator[Cookie]:
        """Iterate the changes to send back: added, replaced, and removed cookies.

        An entry identical to the original of the same name is skipped.
        Computed fresh on every call.
        """
        for name, cookie in self._delta.items():
            if self._original.get(name) != cookie:
                yield cookie


def jar_from_headers(headers: Iterable[bytes]) -> CookieJar:
    """Build a jar from raw ``Cookie`` header values.

    Every header is decoded as UTF-8 and split on ``;``; each trimmed
    segment is parsed as a percent-encoded cookie. A header that is not
    valid UTF-8 is skipped whole, a segment that does not parse is
    dropped. Repeated headers behave like one combined header.
    """
    jar = CookieJar()
    for raw in headers:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping Cookie header that is not valid UTF-8")
            continue
        for segment in text.split(";"):
            segment = segment.strip()
            if not segment:
                continue
            try:
                cookie = Cookie.parse_encoded(segment)
            except CookieParseError as exc:
                logger.debug("Dropping cookie segment: %s", exc)
                continue
            jar.add_original(cookie)
    return jar
