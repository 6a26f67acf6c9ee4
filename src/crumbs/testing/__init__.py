"""Test utilities for apps wrapped in ``CookieManager``.

    from crumbs.testing import TestClient
"""

from crumbs.testing.client import HeaderInput, TestClient, TestResponse

__all__ = [
    "HeaderInput",
    "TestClient",
    "TestResponse",
]
