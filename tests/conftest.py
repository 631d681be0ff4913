import random
from datetime import datetime

import pytest

from cyberbot.dialogue import DialogueManager
from cyberbot.persistence import Persistence, PersistenceError

FIXED_NOW = datetime(2026, 10, 19, 9, 30, 0)


class RecordingStore:
    """In-memory stand-in for Persistence that remembers every call."""

    def __init__(self, tasks=None):
        self.saved = list(tasks or [])
        self.save_calls = 0
        self.activities = []
        self.conversation = []
        self.facts = {}

    def load_tasks(self):
        return list(self.saved)

    def save_tasks(self, tasks):
        self.save_calls += 1
        self.saved = list(tasks)

    def log_activity(self, text):
        self.activities.append(text)

    def recent_activity(self, max_entries=10):
        return self.activities[-max_entries:]

    def append_conversation(self, text):
        self.conversation.append(text)

    def store_user_fact(self, value, category):
        if category == 'interest':
            interests = self.facts.setdefault('interest', [])
            if value not in interests:
                interests.append(value)
        else:
            self.facts[category] = value

    def recall_interests(self):
        return list(self.facts.get('interest', []))


class FailingStore(RecordingStore):
    """Every write that can fail does fail."""

    def save_tasks(self, tasks):
        self.save_calls += 1
        raise PersistenceError("disk full")

    def append_conversation(self, text):
        raise PersistenceError("disk full")

    def store_user_fact(self, value, category):
        raise PersistenceError("disk full")


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def store(tmp_path, clock):
    return Persistence(str(tmp_path / "data"), clock=clock)


@pytest.fixture
def bot(store, clock):
    return DialogueManager(store, rng=random.Random(1234), clock=clock)
