"""Test utilities for lectern sites::

    from lectern.testing import TestClient
"""

from lectern.testing.client import TestClient

__all__ = ["TestClient"]
