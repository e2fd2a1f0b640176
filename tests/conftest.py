"""Shared fixtures for lead qualification tests."""

import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Ensure tests never pick up a real database or config directory
os.environ.pop("DATABASE_URL", None)
os.environ.pop("INDUSTRIES_DIRECTORY", None)

from config.industries import IndustryConfig, IndustryRegistry, REAL_ESTATE, SOFTWARE
from config.settings import Settings
from conversations.finalizer import Finalizer
from conversations.ledger import InMemoryClassificationLedger
from conversations.models import Message, Sender
from conversations.service import ConversationService
from conversations.store import InMemoryConversationStore
from dialogue.definitions import register_all_flows
from dialogue.engine import DialoguePolicy
from lead_scoring.entity_extractor import MetadataExtractor
from lead_scoring.scoring_model import LeadClassifier


class FakeClock:
    """Controllable time source."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def registry():
    return IndustryRegistry(
        [
            *IndustryRegistry().list_all(),
            IndustryConfig(id="insurance", name="Insurance"),
        ]
    )


@pytest.fixture
def real_estate(registry):
    return registry.get(REAL_ESTATE)


@pytest.fixture
def software(registry):
    return registry.get(SOFTWARE)


@pytest.fixture
def insurance(registry):
    return registry.get("insurance")


@pytest.fixture
def extractor(clock):
    return MetadataExtractor(clock=clock)


@pytest.fixture
def lead_classifier():
    return LeadClassifier()


@pytest.fixture
def policy():
    policy = DialoguePolicy(brand_name="GrowEasy")
    register_all_flows(policy)
    return policy


@pytest.fixture
def ledger():
    return InMemoryClassificationLedger()


@pytest.fixture
def service(registry, extractor, lead_classifier, policy, ledger, clock):
    finalizer = Finalizer(classifier=lead_classifier, ledger=ledger, clock=clock, generic_after_minutes=5.0)
    return ConversationService(
        registry=registry,
        store=InMemoryConversationStore(),
        extractor=extractor,
        policy=policy,
        finalizer=finalizer,
        clock=clock,
    )


@pytest.fixture
def make_transcript(clock):
    """Build a transcript: bot greeting, then each user text followed by a bot reply."""

    def _make(*user_texts):
        messages = [Message(id="m0", sender=Sender.BOT, text="Hello!", timestamp=clock())]
        for i, text in enumerate(user_texts, start=1):
            messages.append(Message(id=f"u{i}", sender=Sender.USER, text=text, timestamp=clock()))
            messages.append(Message(id=f"b{i}", sender=Sender.BOT, text="Tell me more.", timestamp=clock()))
        return messages

    return _make


@pytest.fixture
def settings():
    return Settings(database_url=None, industries_directory=None, brand_name="GrowEasy")


@pytest.fixture
def client(settings):
    """Create a FastAPI test client with startup/shutdown run."""
    from api.main import create_app
    with TestClient(create_app(settings)) as test_client:
        yield test_client
