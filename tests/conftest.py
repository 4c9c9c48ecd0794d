"""Shared fixtures for the audioboo_client tests."""

import pytest

from audioboo_client.infrastructure.sinks import QueueSink


@pytest.fixture
def sink():
    """A sink whose deliveries can be inspected with sink.drain()."""
    return QueueSink()
