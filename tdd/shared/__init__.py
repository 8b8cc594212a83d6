# Cross-cutting test utilities shared across all test types

from .fakes import SERVER_KEY_ID, FakeSigner, FakeVerifier

__all__ = [
    "SERVER_KEY_ID",
    "FakeSigner",
    "FakeVerifier",
]
