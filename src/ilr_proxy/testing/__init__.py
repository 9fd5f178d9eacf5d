"""Test utilities for the proxy.

    from ilr_proxy.testing import TestClient
"""

from ilr_proxy.testing.client import TestClient

__all__ = ["TestClient"]
