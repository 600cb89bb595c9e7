import random

import pytest

from chatbot import ResponseEngine
from chatbot.catalog import KNOWLEDGE_BASE


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def engine(rng):
    return ResponseEngine(rng=rng)


@pytest.fixture
def entries_by_id():
    return {entry.id: entry for entry in KNOWLEDGE_BASE}
