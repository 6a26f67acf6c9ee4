"""Signed child view over a request's cookie jar.

Values are signed with ``itsdangerous`` (HMAC-SHA256) before they are
stored, and verified when read back. Clients cannot tamper with or
forge a signed value, but they can read it.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from itsdangerous import BadSignature, Signer

if TYPE_CHECKING:
    from crumbs.cookie import Cookie
    from crumbs.cookies import Cookies
    from crumbs.key import Key


def _signer(key: Key, name: str) -> Signer:
    # Salted per cookie name: a value signed for one name fails under another
    return Signer(key.signing, salt=f"crumbs.signed:{name}", digest_method=hashlib.sha256)


class SignedCookies:
    """A child jar that signs the cookies added to it.

    Shares storage and namespace with the parent ``Cookies``: a signed
    cookie named ``"foo"`` is the same entry a plain ``get("foo")``
    returns, carrying the signed raw value. The key is passed on every
    call and never kept::

        signed = get_cookies().signed
        signed.add(key, Cookie("user_id", "42"))
        user_id = signed.get(key, "user_id")   # None if missing or forged
    """

    __slots__ = ("_cookies",)

    def __init__(self, cookies: Cookies) -> None:
        self._cookies = cookies.clone()

    def add(self, key: Key, cookie: Cookie) -> None:
        """Add *cookie* to the parent jar with its value signed."""
        signed = _signer(key, cookie.name).sign(cookie.value.encode("utf-8"))
        self._cookies.add(cookie.with_value(signed.decode("utf-8")))

    def get(self, key: Key, name: str) -> Cookie | None:
        """Return the cookie called *name* with its verified value.

        Returns ``None`` if the cookie is missing, was not signed, was
        tampered with, or was signed with a different key.
        """
        cookie = self._cookies.get(name)
        if cookie is None:
            return None
        try:
            value = _signer(key, name).unsign(cookie.value.encode("utf-8"))
            return cookie.with_value(value.decode("utf-8"))
        except (BadSignature, UnicodeError):
            return None

    def remove(self, cookie: Cookie | str) -> None:
        """Remove the cookie from the parent jar. No key is needed to delete."""
        self._cookies.remove(cookie)
