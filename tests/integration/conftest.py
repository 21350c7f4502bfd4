"""Shared fixtures for integration tests."""

import os
from pathlib import Path

import pytest

INTEGRATION_DIR = Path(__file__).parent


def pytest_collection_modifyitems(config, items):
    """Skip all integration tests unless RUN_MOSTRO_NETWORK_TESTS=1."""
    if os.environ.get("RUN_MOSTRO_NETWORK_TESTS") == "1":
        return
    skip = pytest.mark.skip(reason="Requires network access. Set RUN_MOSTRO_NETWORK_TESTS=1 to run")
    for item in items:
        if INTEGRATION_DIR in item.path.parents:
            item.add_marker(skip)


@pytest.fixture
def mostro_pubkey():
    """Broker key from the environment; integration runs need a live broker."""
    value = os.environ.get("MOSTRO_PUBKEY")
    if not value:
        pytest.skip("MOSTRO_PUBKEY is not set")
    return value
