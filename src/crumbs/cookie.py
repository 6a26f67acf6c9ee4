"""Cookie parsing and Set-Cookie serialization.

Consolidates the read side (``Cookie.parse``, used by the request-side
jar) and the write side (``Cookie.to_header_value``, used when the delta
is emitted) in one module.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime, parsedate_to_datetime
from enum import StrEnum
from typing import Any
from urllib.parse import unquote

from crumbs.errors import CookieParseError


class SameSite(StrEnum):
    """Values of the ``SameSite`` cookie attribute."""

    STRICT = "Strict"
    LAX = "Lax"
    NONE = "None"


def is_valid_header_value(value: str) -> bool:
    """True if *value* can be sent as an HTTP header value.

    Accepts visible ASCII, space and horizontal tab.
    """
    return all(ch == "\t" or " " <= ch <= "~" for ch in value)


@dataclass(frozen=True, slots=True)
class Cookie:
    """An HTTP cookie: a name-value pair plus optional ``Set-Cookie`` attributes.

    Attributes left as ``None`` are omitted when serialized. Cookies
    parsed from a request ``Cookie`` header carry only name and value.

    Build with keyword arguments and derive variants with ``with_*``::

        cookie = Cookie("theme", "dark", path="/", max_age=3600)
        cookie.with_value("light")
    """

    name: str
    value: str
    max_age: int | None = None
    expires: datetime | None = None
    path: str | None = None
    domain: str | None = None
    secure: bool | None = None
    httponly: bool | None = None
    samesite: SameSite | None = None

    # -- Derivation --

    def with_value(self, value: str) -> Cookie:
        """Return a copy with a different value, keeping all attributes."""
        return replace(self, value=value)

    def with_attrs(self, **attrs: Any) -> Cookie:
        """Return a copy with the given attributes replaced."""
        return replace(self, **attrs)

    def make_removal(self) -> Cookie:
        """Return the marker that tells a client to delete this cookie.

        Empty value, ``Max-Age=0`` and an expiry a year in the past.
        Domain and path are kept: a client only deletes a cookie whose
        domain and path match.
        """
        return replace(
            self,
            value="",
            max_age=0,
            expires=datetime.now(UTC) - timedelta(days=365),
        )

    # -- Serialization --

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={self.value}"]
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.expires is not None:
            expires = self.expires
            # Naive datetimes are taken as UTC, not local time
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=UTC)
            parts.append(f"Expires={format_datetime(expires.astimezone(UTC), usegmt=True)}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        # Browsers reject SameSite=None without Secure
        if self.secure or (self.secure is None and self.samesite is SameSite.NONE):
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite is not None:
            parts.append(f"SameSite={self.samesite}")
        return "; ".join(parts)

    def __str__(self) -> str:
        return self.to_header_value()

    # -- Parsing --

    @classmethod
    def parse(cls, text: str) -> Cookie:
        """Parse ``name=value`` optionally followed by ``; Attr[=val]`` pairs.

        Raises ``CookieParseError`` when the pair has no ``=`` or an empty
        name. Unknown attributes and attributes with unparsable values
        are ignored.
        """
        return cls._parse(text, decode=False)

    @classmethod
    def parse_encoded(cls, text: str) -> Cookie:
        """Like ``parse``, but percent-decodes the name and value."""
        return cls._parse(text, decode=True)

    @classmethod
    def _parse(cls, text: str, *, decode: bool) -> Cookie:
        pair, *attr_parts = text.split(";")
        if "=" not in pair:
            msg = "Cookie pair has no '='"
            raise CookieParseError(msg)
        name, _, value = pair.partition("=")
        name = name.strip()
        value = value.strip()
        if not name:
            msg = "Cookie name must not be empty"
            raise CookieParseError(msg)
        if decode:
            try:
                name = unquote(name, errors="strict")
                value = unquote(value, errors="strict")
            except UnicodeDecodeError as exc:
                msg = f"Cookie {name!r} is not valid percent-encoded UTF-8"
                raise CookieParseError(msg) from exc

        attrs: dict[str, Any] = {}
        for part in attr_parts:
            key, _, raw = part.partition("=")
            key = key.strip().lower()
            raw = raw.strip()
            match key:
                case "max-age":
                    try:
                        attrs["max_age"] = int(raw)
                    except ValueError:
                        continue
                case "expires":
                    try:
                        expires = parsedate_to_datetime(raw)
                    except (TypeError, ValueError):
                        continue
                    if expires.tzinfo is None:
                        expires = expires.replace(tzinfo=UTC)
                    attrs["expires"] = expires
                case "path":
                    attrs["path"] = raw or None
                case "domain":
                    attrs["domain"] = raw or None
                case "secure":
                    attrs["secure"] = True
                case "httponly":
                    attrs["httponly"] = True
                case "samesite":
                    for option in SameSite:
                        if option.value.lower() == raw.lower():
                            attrs["samesite"] = option
        return cls(name, value, **attrs)
