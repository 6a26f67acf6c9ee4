"""Reader — lists the request's cookies without changing any.

Demonstrates:
- Listing the jar with ``get_cookies().list()``
- A read-only request sends no ``Set-Cookie`` headers back

Run with any ASGI server:
    cd examples/reader && uvicorn app:app
"""

from crumbs import CookieManager, get_cookies


async def reader(scope, receive, send) -> None:
    items = sorted(f"{c.name}={c.value}" for c in get_cookies().list())
    body = ", ".join(items) or "No cookies"
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"content-type", b"text/plain; charset=utf-8")],
        }
    )
    await send({"type": "http.response.body", "body": body.encode("utf-8")})


app = CookieManager(reader)
