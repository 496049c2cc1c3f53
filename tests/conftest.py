"""
tests/conftest.py
Shared fixtures: card builders, a fake clock and mocked HTTP responses.
"""

import pytest
from unittest.mock import MagicMock
from solomon_draft.constants import Color
from solomon_draft.models import CardMetadata, CardRef


class FakeClock:
    """Monotonic clock whose sleep advances time instantly"""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def card_factory():
    def make_card(name, colors="", quantity=1):
        return CardRef(
            id=f"id-{name}",
            name=name,
            color_identity=frozenset(Color(c) for c in colors),
            quantity=quantity,
        )

    return make_card


@pytest.fixture
def metadata_resolver():
    """Resolver that knows every name except those starting with 'Unknown'"""

    def resolve(names):
        return {
            name: CardMetadata(id=f"id-{name}", name=name)
            for name in names
            if not name.startswith("Unknown")
        }

    return MagicMock(side_effect=resolve)


@pytest.fixture
def make_response():
    def build(status_code=200, payload=None, text="", headers=None):
        response = MagicMock()
        response.status_code = status_code
        response.reason = "OK" if status_code == 200 else "Error"
        response.headers = headers or {}
        response.text = text
        response.json.return_value = payload if payload is not None else {}
        return response

    return build
