"""Test utilities for edgekit applications::

    from edgekit.testing import TestClient, encode_multipart
"""

from edgekit.testing.client import TestClient
from edgekit.testing.multipart import encode_multipart

__all__ = ["TestClient", "encode_multipart"]
