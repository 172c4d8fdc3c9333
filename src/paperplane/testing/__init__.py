"""Test utilities for paperplane applications::

    from paperplane.testing import TestClient
"""

from paperplane.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]
