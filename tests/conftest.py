"""Shared fixtures for the query compiler tests."""

from __future__ import annotations

import pytest

from core.errors import ResolutionError
from core.models import Identity


class CountingResolver:
    """Resolver double that records how often it was asked."""

    def __init__(self, identity: Identity | None = None, error: BaseException | None = None):
        self.identity = identity
        self.error = error
        self.calls = 0

    async def resolve_current_user(self) -> Identity:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.identity


@pytest.fixture
def identity() -> Identity:
    return Identity(id="12345678-aaaa-bbbb-cccc-1234567890ab", mention_name="amcd", name="A. McDonald")


@pytest.fixture
def resolver(identity) -> CountingResolver:
    return CountingResolver(identity)


@pytest.fixture
def failing_resolver() -> CountingResolver:
    return CountingResolver(error=ResolutionError(None, "no authenticated session"))
