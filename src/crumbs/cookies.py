"""The per-request cookie jar handed to handlers.

``Cookies`` is a handle to one request's jar. The jar is parsed from the
raw ``Cookie`` headers on first use, guarded by a lock, and remembers
whether it was ever mutated so the middleware knows whether to emit
``Set-Cookie`` headers at all.

Copies of a handle (``clone()`` / ``copy.copy``) share the same jar, so
any number of components in one request can read and write it.

Thread safety:
    Every operation is one short synchronous critical section under a
    ``threading.Lock``. No lock is held while awaiting, and snapshots are
    copied out before the lock is released.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from crumbs.cookie import Cookie, is_valid_header_value
from crumbs.jar import CookieJar, jar_from_headers

if TYPE_CHECKING:
    from crumbs.private import PrivateCookies
    from crumbs.signed import SignedCookies

logger = logging.getLogger("crumbs.jar")


class _JarState:
    """Raw headers, the lazily parsed jar, and the dirty flag of one request."""

    __slots__ = ("changed", "headers", "jar", "lock")

    def __init__(self, headers: tuple[bytes, ...]) -> None:
        self.headers = headers
        self.jar: CookieJar | None = None
        self.changed = False
        self.lock = threading.Lock()

    def cookie_jar(self) -> CookieJar:
        """Cached jar. Caller must hold ``lock``."""
        if self.jar is None:
            self.jar = jar_from_headers(self.headers)
        return self.jar


class Cookies:
    """A parsed on-demand cookie jar shared by everything handling one request.

    Obtained from ``get_cookies()`` inside a request wrapped by
    ``CookieManager``::

        from crumbs import Cookie, get_cookies

        cookies = get_cookies()
        visits = int(cookies.get("visits").value) if "visits" in cookies else 0
        cookies.add(Cookie("visits", str(visits + 1)))

    Only ``add`` and ``remove`` (and the ``add`` of the signed and
    private views) mark the jar as changed. Reads never do, so a
    read-only request produces no ``Set-Cookie`` headers.
    """

    __slots__ = ("_state",)

    def __init__(self, headers: Iterable[bytes] = ()) -> None:
        self._state = _JarState(tuple(headers))

    @classmethod
    def _from_state(cls, state: _JarState) -> Cookies:
        handle = cls.__new__(cls)
        handle._state = state
        return handle

    def clone(self) -> Cookies:
        """Return another handle to the same jar."""
        return Cookies._from_state(self._state)

    __copy__ = clone

    @contextmanager
    def _locked(self, *, mutate: bool = False) -> Iterator[CookieJar]:
        state = self._state
        with state.lock:
            if mutate:
                state.changed = True
            yield state.cookie_jar()

    # -- Jar operations --

    def add(self, cookie: Cookie) -> None:
        """Add *cookie*. A cookie with the same name is replaced."""
        with self._locked(mutate=True) as jar:
            jar.add(cookie)

    def get(self, name: str) -> Cookie | None:
        """Return the cookie called *name*, or ``None`` if it is absent or removed."""
        with self._locked() as jar:
            return jar.get(name)

    def remove(self, cookie: Cookie | str) -> None:
        """Remove a cookie, given as a ``Cookie`` or by name.

        A ``Cookie`` is removed as given; its domain and path must match
        the ones the client stored for the removal to take effect. A
        bare name takes domain and path from the cookie the client sent
        under that name. Without one it is a no-op, so a cookie added
        earlier in this request survives; it still counts as a change.
        """
        with self._locked(mutate=True) as jar:
            match cookie:
                case Cookie():
                    jar.remove(cookie)
                case str():
                    original = jar.get_original(cookie)
                    if original is not None:
                        jar.remove(original)
                case _:
                    msg = f"remove() expects a Cookie or a name, got {type(cookie).__name__}"
                    raise TypeError(msg)

    def list(self) -> list[Cookie]:
        """Return all live cookies.

        Collected into a new list under a single lock acquisition, so the
        lock is not held while the caller works with the result.
        """
        with self._locked() as jar:
            return [*jar]

    def __contains__(self, name: object) -> bool:
        with self._locked() as jar:
            return name in jar

    # -- Child views --

    @property
    def signed(self) -> SignedCookies:
        """View whose cookies are signed: tamper-proof but readable."""
        from crumbs.signed import SignedCookies

        return SignedCookies(self)

    @property
    def private(self) -> PrivateCookies:
        """View whose cookies are encrypted and authenticated."""
        from crumbs.private import PrivateCookies

        return PrivateCookies(self)

    # -- Response side --

    @property
    def changed(self) -> bool:
        """True once any cookie was added or removed during this request."""
        with self._state.lock:
            return self._state.changed

    def set_cookie_headers(self) -> list[bytes]:
        """Serialize the changes into ``Set-Cookie`` header values.

        Returns an empty list when nothing was changed. Entries that do
        not form a valid header value are dropped.
        """
        with self._state.lock:
            if not self._state.changed:
                return []
            delta = [*self._state.cookie_jar().delta()]

        values: list[bytes] = []
        for cookie in delta:
            value = cookie.to_header_value()
            if not is_valid_header_value(value):
                logger.debug("Dropping cookie %r: not a valid Set-Cookie value", cookie.name)
                continue
            values.append(value.encode("latin-1"))
        return values

    def __repr__(self) -> str:
        return f"<Cookies changed={self.changed}>"
