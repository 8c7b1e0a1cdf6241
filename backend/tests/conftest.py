"""Root conftest — shared test configuration."""

import os

import pytest

# Ensure tests never touch a real database or a developer's .env values
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from tests.fakes import FakeClock, SequentialIds  # noqa: E402
from tasktracker.infrastructure.kv_store import InMemoryKeyValueMap  # noqa: E402
from tasktracker.services.task_access import TaskAccessLayer  # noqa: E402


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def task_store():
    return InMemoryKeyValueMap()


@pytest.fixture
def user_index():
    return InMemoryKeyValueMap()


@pytest.fixture
def access(task_store, user_index, clock):
    """Access layer over fresh in-memory maps with deterministic ids."""
    return TaskAccessLayer(
        task_store, user_index, clock, id_factory=SequentialIds("task"),
    )
