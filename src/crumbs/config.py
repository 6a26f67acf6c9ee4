"""Cookie middleware configuration.

CookieConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CookieConfig:
    """Configuration for ``CookieManager``. Immutable after creation.

    The defaults suit almost every app. Override what you need::

        config = CookieConfig(scope_key="myapp.cookies")
    """

    # ASGI scope key the per-request ``Cookies`` handle is published under
    scope_key: str = "crumbs.cookies"

    # Request header the jar is parsed from (every occurrence, in order)
    header_name: str = "cookie"
