import pytest

from .helpers import FakeChain


@pytest.fixture(scope="function")
def fake_chain() -> FakeChain:
    """Provides a fresh scripted chain per test."""
    return FakeChain()
