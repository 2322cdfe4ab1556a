"""Testing utilities for in-process gateway simulations."""

from .fake_backend import BackendResponse, FakeBackend, ReceivedRequest

__all__ = [
    "BackendResponse",
    "FakeBackend",
    "ReceivedRequest",
]
