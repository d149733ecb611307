"""Test fixtures for content-bridge.

Contains fixtures for:
- In-memory content stores with a deterministic clock
- The FastAPI application and HTTP clients
"""

from .store import FakeClock, seed_items

__all__ = [
    "FakeClock",
    "seed_items",
]
