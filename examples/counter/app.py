"""Counter — counts visits in a plain cookie and resets after ten.

Demonstrates:
- Reading a cookie with ``get_cookies().get()``
- Replacing it with ``add()``
- Deleting it by name with ``remove()``

Run with any ASGI server:
    cd examples/counter && uvicorn app:app
"""

from crumbs import Cookie, CookieManager, get_cookies

COOKIE_NAME = "visited"


async def counter(scope, receive, send) -> None:
    cookies = get_cookies()
    cookie = cookies.get(COOKIE_NAME)
    try:
        visited = int(cookie.value) if cookie else 0
    except ValueError:
        visited = 0

    if visited > 10:
        cookies.remove(COOKIE_NAME)
        body = "Counter has been reset"
    else:
        cookies.add(Cookie(COOKIE_NAME, str(visited + 1)))
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
