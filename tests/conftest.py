"""Shared fixtures for the storyboard engine tests."""

import base64

import pytest

from cinegen.credits import CreditLedger, CreditStore
from cinegen.errors import ProviderError
from cinegen.registry import SceneRegistry
from cinegen.session import Session

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PNG_URI = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


class FakeProvider:
    """Scripted stand-in for the generation provider.

    ``image_outcomes`` maps a prompt to either an image reference or an
    exception instance to raise. Unlisted prompts succeed with PNG_URI.
    """

    def __init__(self, storyline=None, image_outcomes=None, on_image=None):
        self.storyline = storyline if storyline is not None else []
        self.image_outcomes = image_outcomes or {}
        self.on_image = on_image
        self.storyline_calls = []
        self.image_calls = []

    def generate_storyline(self, summary, scene_count, style):
        self.storyline_calls.append((summary, scene_count, style))
        if isinstance(self.storyline, Exception):
            raise self.storyline
        return self.storyline

    def generate_image(self, prompt, style, aspect_ratio):
        self.image_calls.append((prompt, style, aspect_ratio))
        if self.on_image:
            self.on_image(prompt)
        outcome = self.image_outcomes.get(prompt, PNG_URI)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def store(tmp_path):
    return CreditStore(tmp_path / "credits.yaml")


@pytest.fixture
def ledger(store):
    return CreditLedger.load(store)


@pytest.fixture
def registry():
    registry = SceneRegistry()
    registry.initialize(3)
    return registry


@pytest.fixture
def session(ledger, registry):
    return Session(ledger=ledger, registry=registry, style="noir")


@pytest.fixture
def failure():
    return ProviderError("boom")
