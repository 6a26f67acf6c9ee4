"""Cookie middleware — lazy per-request jar, delta written back on response.

``CookieManager`` wraps any ASGI application. For every HTTP request it
captures the raw ``Cookie`` headers, creates a fresh ``Cookies`` handle
(parsing is deferred until a handler touches it), and publishes it two
ways:

- in a ContextVar, read with ``get_cookies()`` from any handler code;
- in the ASGI scope passed downstream, read with ``cookies_from_scope()``.

When the inner app starts its response, the jar is checked once more and,
if any cookie was added or removed, one ``Set-Cookie`` header per change
is appended. If the inner app raises before responding, the error
propagates untouched and no cookie headers are produced.
"""

import logging
from contextvars import ContextVar
from dataclasses import dataclass, field

from crumbs._internal.asgi import ASGIApp, Message, Receive, Scope, Send
from crumbs.config import CookieConfig
from crumbs.cookies import Cookies
from crumbs.errors import ConfigurationError, CookiesNotInstalled
from crumbs.headers import Headers

logger = logging.getLogger("crumbs.middleware")

# -- Cookies ContextVar --

_cookies_var: ContextVar[Cookies | None] = ContextVar("crumbs_cookies", default=None)


def get_cookies() -> Cookies:
    """Return the cookie jar of the current request.

    Raises ``CookiesNotInstalled`` (an ``HTTPError`` with status 500) if
    called outside a request wrapped by ``CookieManager``.
    """
    cookies = _cookies_var.get()
    if cookies is None:
        raise CookiesNotInstalled()
    return cookies


def cookies_from_scope(scope: Scope, config: CookieConfig | None = None) -> Cookies:
    """Return the cookie jar published in an ASGI *scope*.

    Raises ``CookiesNotInstalled`` if ``CookieManager`` did not handle
    this scope.
    """
    key = (config or CookieConfig()).scope_key
    cookies = scope.get(key)
    if not isinstance(cookies, Cookies):
        raise CookiesNotInstalled()
    return cookies


# -- Middleware --


class CookieManager:
    """ASGI middleware that gives the wrapped app a change-tracked cookie jar.

    Usage::

        from crumbs import Cookie, CookieManager, get_cookies

        async def inner(scope, receive, send):
            cookies = get_cookies()
            cookies.add(Cookie("visited", "1"))
            ...

        app = CookieManager(inner)

    Non-HTTP scopes (``lifespan``, ``websocket``) are passed through
    unchanged.
    """

    __slots__ = ("_app", "_config")

    def __init__(self, app: ASGIApp, config: CookieConfig | None = None) -> None:
        config = config or CookieConfig()
        if not config.scope_key:
            msg = "CookieConfig.scope_key must not be empty."
            raise ConfigurationError(msg)
        if not config.header_name:
            msg = "CookieConfig.header_name must not be empty."
            raise ConfigurationError(msg)
        self._app = app
        self._config = config

    @property
    def app(self) -> ASGIApp:
        """The wrapped ASGI application."""
        return self._app

    @property
    def config(self) -> CookieConfig:
        return self._config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Publish a fresh jar, dispatch, then append the jar's changes to the response."""
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        headers = Headers(scope.get("headers", ()))
        cookies = Cookies(headers.get_raw_list(self._config.header_name))
        child_scope = {**scope, self._config.scope_key: cookies}

        async def send_with_cookies(message: Message) -> None:
            if message["type"] == "http.response.start":
                message = _append_set_cookies(message, cookies)
            await send(message)

        token = _cookies_var.set(cookies)
        try:
            await self._app(child_scope, receive, send_with_cookies)
        finally:
            _cookies_var.reset(token)


def _append_set_cookies(message: Message, cookies: Cookies) -> Message:
    """Return *message* with one ``set-cookie`` header per jar change."""
    values = cookies.set_cookie_headers()
    if not values:
        return message
    logger.debug("Appending %d Set-Cookie header(s)", len(values))
    extra = [(b"set-cookie", value) for value in values]
    return {**message, "headers": [*message.get("headers", ()), *extra]}


# -- Factory --


@dataclass(frozen=True, slots=True)
class CookieLayer:
    """Stateless factory that wraps apps in ``CookieManager``.

    Useful where a stack of middleware is assembled from factories::

        layer = CookieLayer()
        app = layer(inner_app)
    """

    config: CookieConfig = field(default_factory=CookieConfig)

    def wrap(self, app: ASGIApp) -> CookieManager:
        """Return *app* wrapped in a ``CookieManager`` using this layer's config."""
        return CookieManager(app, self.config)

    def __call__(self, app: ASGIApp) -> CookieManager:
        return self.wrap(app)
