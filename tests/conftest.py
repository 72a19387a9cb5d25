# tests/conftest.py
import itertools
import json
import logging
import os
import random
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.cloud import firestore

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from explorer.utils.config import Settings
from explorer.services.rate_limiter import InMemorySlotStore, RateLimiter
from explorer.services.generation_service import GenerationService


# --- Canned model output ---
EXPLORE_JSON = {
    "content": {"paragraph1": "a", "paragraph2": "b", "paragraph3": "c"},
    "relatedTopics": [{"name": "X", "type": "extension", "reason": "r"}],
    "relatedQuestions": [{"text": "Q?", "type": "insight", "context": "c"}],
}

PLAYGROUND_JSON = {
    "questions": [
        {
            "text": "What does a mitochondrion produce?",
            "options": {"A": "ATP", "B": "DNA", "C": "Lipids", "D": "Starch"},
            "correctAnswer": "A",
            "explanation": {"correct": "Mitochondria make ATP.", "key_point": "Energy currency"},
            "subtopic": "Organelles",
        },
        {
            "text": "Which organelle holds chlorophyll?",
            "options": {"A": "Nucleus", "B": "Ribosome", "C": "Chloroplast", "D": "Vacuole"},
            "correctAnswer": "C",
            "explanation": {"correct": "Chloroplasts hold chlorophyll.", "key_point": "Photosynthesis site"},
        },
    ]
}


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGateway:
    """Stands in for ModelGateway: canned text for generate, canned chunks for stream."""

    def __init__(self, text: str = "", chunks=None):
        self.generate = AsyncMock(return_value=text)
        self.chunks = list(chunks or [])
        self.stream_prompts = []

    async def stream(self, prompt, temperature=None):
        self.stream_prompts.append(prompt)
        for chunk in self.chunks:
            yield chunk


# --- Fake Firestore (AsyncClient subset used by ChatHistoryService) ---
class FakeDocumentReference:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id


class FakeDocumentSnapshot:
    def __init__(self, reference, data):
        self.id = reference.id
        self.reference = reference
        self._data = data

    def to_dict(self):
        return dict(self._data)


class FakeQuery:
    def __init__(self, collection, filters=(), order=None, limit_to=None):
        self.collection = collection
        self.filters = filters
        self.order = order
        self.limit_to = limit_to

    def where(self, filter=None):
        return FakeQuery(self.collection, self.filters + (filter,), self.order, self.limit_to)

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return FakeQuery(self.collection, self.filters, (field, direction), self.limit_to)

    def limit(self, count):
        return FakeQuery(self.collection, self.filters, self.order, count)

    async def stream(self):
        docs = list(self.collection.docs.items())
        for f in self.filters:
            assert f.op_string == "=="
            docs = [(i, d) for i, d in docs if d.get(f.field_path) == f.value]
        if self.order:
            field, direction = self.order
            docs.sort(key=lambda item: item[1][field], reverse=direction == firestore.Query.DESCENDING)
        if self.limit_to is not None:
            docs = docs[:self.limit_to]
        for doc_id, data in docs:
            yield FakeDocumentSnapshot(FakeDocumentReference(self.collection, doc_id), data)


class FakeCollection(FakeQuery):
    def __init__(self, name, clock):
        self.name = name
        self.docs = {}
        self._ids = itertools.count(1)
        self._clock = clock
        super().__init__(self)

    async def add(self, data):
        stored = dict(data)
        stamp = next(self._clock)
        for key, value in stored.items():
            if value is firestore.SERVER_TIMESTAMP:
                stored[key] = stamp
        doc_id = f"doc{next(self._ids)}"
        self.docs[doc_id] = stored
        return stamp, FakeDocumentReference(self, doc_id)


class FakeWriteBatch:
    def __init__(self, client):
        self.client = client
        self.deletes = []

    def delete(self, reference):
        self.deletes.append(reference)

    async def commit(self):
        for reference in self.deletes:
            reference.collection.docs.pop(reference.id, None)
        self.client.committed_batches.append(len(self.deletes))


class FakeFirestoreClient:
    def __init__(self):
        self.collections = {}
        self.committed_batches = []
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._clock = (base + timedelta(seconds=i) for i in itertools.count())

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, self._clock)
        return self.collections[name]

    def batch(self):
        return FakeWriteBatch(self)


# --- Fixtures ---
@pytest.fixture
def test_settings():
    return Settings(llm_provider="google", google_api_key="test-key")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def slot_store():
    return InMemorySlotStore()


@pytest.fixture
def rate_limiter(slot_store, test_settings, clock):
    return RateLimiter(slot_store, test_settings, clock=clock)


@pytest.fixture
def explore_gateway():
    return FakeGateway(text=json.dumps(EXPLORE_JSON))


@pytest.fixture
def playground_gateway():
    return FakeGateway(text="Here you go:\n" + json.dumps(PLAYGROUND_JSON) + "\nEnjoy!")


@pytest.fixture
def fake_firestore():
    return FakeFirestoreClient()


@pytest.fixture
def mock_learning_api():
    api = MagicMock()
    api.get_question = AsyncMock()
    api.explore = AsyncMock()
    return api


def make_generation_service(gateway, seed: int = 7) -> GenerationService:
    return GenerationService(gateway, rng=random.Random(seed))
