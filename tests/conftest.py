"""
Pytest configuration and shared fixtures.

Key fixtures:
- b64: base64-encode a string the way a publisher would
- push_envelope: a well-formed push body carrying a SomeDto payload
- fake_context: an in-memory RequestContext for interceptor tests
"""

import base64
import sys
from pathlib import Path
from typing import Any

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


def encode(text: str) -> str:
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


class FakeRequestContext:
    """RequestContext that records what the interceptor does to it."""

    def __init__(self, body: bytes = b''):
        self.raw_body = body
        self.headers: dict[str, str] = {}
        self.body: Any = None
        self.body_set = False
        self.status_code: int | None = None

    async def get_body(self) -> bytes:
        return self.raw_body

    def set_body(self, payload: Any) -> None:
        self.body = payload
        self.body_set = True

    def set_status(self, status_code: int) -> None:
        self.status_code = status_code


@pytest.fixture
def b64():
    """Base64 encoder for message data."""
    return encode


@pytest.fixture
def push_envelope() -> dict[str, Any]:
    """Push body as delivered by a Pub/Sub push subscription."""
    return {
        'subscription': 'projects/a-gcp-project/subscriptions/test-pubsub-message',
        'message': {
            'data': encode('{"someString":"mystring", "someNumber":1}'),
            'messageId': '1',
            'attributes': {
                'foo': 'bar',
            },
        },
    }


@pytest.fixture
def fake_context():
    """Factory for FakeRequestContext instances."""
    return FakeRequestContext
