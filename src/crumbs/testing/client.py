"""Async in-process test client for ASGI applications.

Sends requests through the ASGI interface directly — no HTTP involved.
Headers may be given as a mapping or as a sequence of pairs, so a
request can carry the same header more than once.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from crumbs._internal.asgi import ASGIApp, Message
from crumbs.headers import Headers

HeaderInput: TypeAlias = Mapping[str, str] | Sequence[tuple[str, str]]


@dataclass(frozen=True, slots=True)
class TestResponse:
    """A response captured from the app under test."""

    __test__ = False  # Tell pytest this is not a test class

    status: int
    headers: Headers
    body: bytes = b""

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")

    @property
    def set_cookies(self) -> list[str]:
        """All ``Set-Cookie`` header values, in the order they were sent."""
        return self.headers.get_list("set-cookie")


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for ASGI applications.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/", headers={"Cookie": "a=1"})
            assert response.status == 200

    Repeated headers::

        await client.get("/", headers=[("Cookie", "a=1"), ("Cookie", "b=2")])
    """

    __slots__ = ("app",)

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(self, path: str, *, headers: HeaderInput | None = None) -> TestResponse:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: HeaderInput | None = None,
        body: bytes | None = None,
    ) -> TestResponse:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body)

    async def delete(self, path: str, *, headers: HeaderInput | None = None) -> TestResponse:
        """Send a DELETE request."""
        return await self.request("DELETE", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: HeaderInput | None = None,
        body: bytes | None = None,
    ) -> TestResponse:
        """Send an arbitrary request through the ASGI app."""
        # Split path and query string
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        pairs = headers.items() if isinstance(headers, Mapping) else (headers or ())
        raw_headers: list[tuple[bytes, bytes]] = [
            (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs
        ]

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        request_body = body or b""
        body_sent = False

        async def receive() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 500
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: Message) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        return TestResponse(
            status=response_status,
            headers=Headers(response_headers),
            body=b"".join(response_body_parts),
        )
