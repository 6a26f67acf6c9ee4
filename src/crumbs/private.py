"""Private child view over a request's cookie jar.

Values are encrypted and authenticated with AES-256-GCM
(``cryptography``) before they are stored. Clients can neither read nor
modify a private value.
"""

from __future__ import annotations

import base64
import binascii
import os
from typing import TYPE_CHECKING

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

if TYPE_CHECKING:
    from crumbs.cookie import Cookie
    from crumbs.cookies import Cookies
    from crumbs.key import Key

NONCE_LEN = 12
TAG_LEN = 16


def encrypt_value(key: Key, name: str, value: str) -> str:
    """Encrypt *value* for the cookie called *name*.

    The name is bound in as associated data, so a value cannot be moved
    to a cookie with another name. Output is ``urlsafe_b64(nonce + ciphertext)``.
    """
    nonce = os.urandom(NONCE_LEN)
    sealed = AESGCM(key.encryption).encrypt(nonce, value.encode("utf-8"), name.encode("utf-8"))
    return base64.urlsafe_b64encode(nonce + sealed).decode("ascii")


def decrypt_value(key: Key, name: str, value: str) -> str | None:
    """Reverse ``encrypt_value``; ``None`` if *value* does not authenticate."""
    try:
        data = base64.urlsafe_b64decode(value.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError):
        return None
    if len(data) < NONCE_LEN + TAG_LEN:
        return None
    nonce, sealed = data[:NONCE_LEN], data[NONCE_LEN:]
    try:
        plain = AESGCM(key.encryption).decrypt(nonce, sealed, name.encode("utf-8"))
        return plain.decode("utf-8")
    except (InvalidTag, UnicodeDecodeError):
        return None


class PrivateCookies:
    """A child jar that encrypts the cookies added to it.

    Shares storage and namespace with the parent ``Cookies``. The key is
    passed on every call and never kept::

        private = get_cookies().private
        private.add(key, Cookie("cart", "3 items"))
        cart = private.get(key, "cart")   # None if missing or not decryptable
    """

    __slots__ = ("_cookies",)

    def __init__(self, cookies: Cookies) -> None:
        self._cookies = cookies.clone()

    def add(self, key: Key, cookie: Cookie) -> None:
        """Add *cookie* to the parent jar with its value encrypted."""
        self._cookies.add(cookie.with_value(encrypt_value(key, cookie.name, cookie.value)))

    def get(self, key: Key, name: str) -> Cookie | None:
        """Return the cookie called *name* with its decrypted value.

        Returns ``None`` if the cookie is missing, was not encrypted, was
        tampered with, or was encrypted with a different key.
        """
        cookie = self._cookies.get(name)
        if cookie is None:
            return None
        value = decrypt_value(key, name, cookie.value)
        if value is None:
            return None
        return cookie.with_value(value)

    def remove(self, cookie: Cookie | str) -> None:
        """Remove the cookie from the parent jar. No key is needed to delete."""
        self._cookies.remove(cookie)
