"""Crumbs — lazy, change-tracked cookies for ASGI applications.

Wrap an app in ``CookieManager`` and every request gets a cookie jar
that is parsed on first use and writes only what changed back to the
client as ``Set-Cookie`` headers.

Basic usage::

    from crumbs import Cookie, CookieManager, get_cookies

    async def inner(scope, receive, send):
        cookies = get_cookies()
        visits = cookies.get("visits")
        count = int(visits.value) + 1 if visits else 1
        cookies.add(Cookie("visits", str(count)))
        ...

    app = CookieManager(inner)

Signed and private cookies (keys are passed per call)::

    from crumbs import Key

    key = Key.generate()
    cookies.signed.add(key, Cookie("user", "42"))
    cookies.private.get(key, "cart")
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Cookie",
    "CookieConfig",
    "CookieJar",
    "CookieLayer",
    "CookieManager",
    "CookieParseError",
    "Cookies",
    "CookiesNotInstalled",
    "CrumbsError",
    "HTTPError",
    "Key",
    "PrivateCookies",
    "SameSite",
    "SignedCookies",
    "cookies_from_scope",
    "get_cookies",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import crumbs`` fast and defers loading ``cryptography`` and
    ``itsdangerous`` until a key or a view is actually used.
    """
    if name in ("Cookie", "SameSite"):
        from crumbs import cookie as _cookie

        return getattr(_cookie, name)

    if name == "CookieJar":
        from crumbs.jar import CookieJar

        return CookieJar

    if name == "Cookies":
        from crumbs.cookies import Cookies

        return Cookies

    if name == "SignedCookies":
        from crumbs.signed import SignedCookies

        return SignedCookies

    if name == "PrivateCookies":
        from crumbs.private import PrivateCookies

        return PrivateCookies

    if name == "Key":
        from crumbs.key import Key

        return Key

    if name == "CookieConfig":
        from crumbs.config import CookieConfig

        return CookieConfig

    if name in ("CookieLayer", "CookieManager", "cookies_from_scope", "get_cookies"):
        from crumbs import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "CookieParseError",
        "CookiesNotInstalled",
        "CrumbsError",
        "HTTPError",
    ):
        from crumbs import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
