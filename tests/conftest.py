"""Shared fixtures for the test suite."""

import pytest

from tests.support.fakes import TEST_TOKEN, FakeSession


@pytest.fixture
def token() -> str:
    return TEST_TOKEN


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def mp3_payload() -> bytes:
    """Bytes standing in for an MPEG audio stream (no ID3 header)."""
    return b"\xff\xfb\x90\x64" + bytes(range(256)) * 64
