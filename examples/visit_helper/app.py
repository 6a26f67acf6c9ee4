"""Visit helper — cookie handling moved out of the handler.

The same counter as ``examples/counter``, but the jar is read and
updated by a small helper that takes the ASGI scope, the way a
framework's parameter extractor would. The handler only sees the count.

Run with any ASGI server:
    cd examples/visit_helper && uvicorn app:app
"""

from crumbs import Cookie, CookieManager, cookies_from_scope

COOKIE_NAME = "visited"


def visit_count(scope) -> int:
    """Read, bump and store the visit counter; return the new count."""
    cookies = cookies_from_scope(scope)
    cookie = cookies.get(COOKIE_NAME)
    try:
        visited = int(cookie.value) + 1 if cookie else 1
    except ValueError:
        visited = 1
    cookies.add(Cookie(COOKIE_NAME, str(visited)))
    return visited


async def handler(scope, receive, send) -> None:
    body = f"You have visited this page {visit_count(scope)} times"
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"content-type", b"text/plain; charset=utf-8")],
        }
    )
    await send({"type": "http.response.body", "body": body.encode("utf-8")})


app = CookieManager(handler)
