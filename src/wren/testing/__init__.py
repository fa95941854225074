"""Testing utilities for wren applications."""

from wren.testing.client import TestClient

__all__ = ["TestClient"]
