"""Shared fixtures for CPAT Trainer tests."""

from datetime import datetime, timedelta, timezone

import pytest

from cpattrainer.classroom import MemoryStorage, Navigator, ProgressStore, load_curriculum
from cpattrainer.schemas import SAFETY_GATE_ID, Curriculum, Module

MODULE_IDS = [
    "01-light-color-fundamentals",
    "02-therapeutic-mechanisms",
    "03-clinical-applications",
    "04-safety-protocols",
    "05-patient-assessment",
    "06-practical-implementation",
]


class FakeClock:
    """Clock that advances one minute on every call."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


def make_curriculum(*ids: str) -> Curriculum:
    """Linear curriculum: each module requires the safety gate and every earlier module."""
    return Curriculum(modules=[
        Module(
            id=module_id,
            title=module_id.title(),
            position=i + 1,
            prerequisites=[SAFETY_GATE_ID, *ids[:i]],
        )
        for i, module_id in enumerate(ids)
    ])


@pytest.fixture
def curriculum() -> Curriculum:
    return load_curriculum()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(curriculum, storage, clock) -> ProgressStore:
    return ProgressStore(curriculum, storage=storage, clock=clock, user_agent="pytest")


@pytest.fixture
def navigator(curriculum, store) -> Navigator:
    return Navigator(curriculum, store)
