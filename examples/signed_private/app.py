"""Signed & private counter — the counter example with protected cookies.

Demonstrates:
- Keys created by the app and passed per call (crumbs never stores them)
- ``cookies.private`` for an encrypted counter, ``cookies.signed`` for a
  readable but tamper-proof one
- Forged or foreign values read as "absent" and the counter starts over

Run with any ASGI server:
    cd examples/signed_private && uvicorn app:app
"""

from crumbs import Cookie, CookieManager, Key, get_cookies

PRIVATE_COOKIE = "visited_private"
SIGNED_COOKIE = "visited_signed"

# Your real key must come from a secret store, not from code
KEY = Key.from_bytes(bytes(64))


def _count(cookie: Cookie | None) -> int:
    if cookie is None:
        return 0
    try:
        return int(cookie.value)
    except ValueError:
        return 0


async def counter(scope, receive, send) -> None:
    cookies = get_cookies()
    private = cookies.private
    visited = _count(private.get(KEY, PRIVATE_COOKIE))

    if visited > 10:
        cookies.remove(PRIVATE_COOKIE)
        cookies.remove(SIGNED_COOKIE)
        body = "Counter has been reset"
    else:
        private.add(KEY, Cookie(PRIVATE_COOKIE, str(visited + 1), httponly=True))
        cookies.signed.add(KEY, Cookie(SIGNED_COOKIE, str(visited + 1)))
        body = f"You've been here {visited} times before"

    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"content-type", b"text/plain; charset=utf-8")],
        }
    )
    await send({"type": "http.response.body", "body": body.encode("utf-8")})


app = CookieManager(counter)
