"""Shared fixtures for sortstrip tests."""

import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def shuffled(rng):
    """Factory: a reproducibly shuffled range(n)."""
    def make(n):
        arr = list(range(n))
        rng.shuffle(arr)
        return arr
    return make


class FakeSleep:
    """Stands in for asyncio.sleep; records every requested delay."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class RecordingPresenter:
    def __init__(self):
        self.frames = []
        self.labels = []
        self._label = ""

    @property
    def label(self):
        return self._label

    @label.setter
    def label(self, value):
        self._label = value
        self.labels.append(value)

    async def __call__(self, frame):
        self.frames.append(frame)


@pytest.fixture()
def fake_sleep():
    return FakeSleep()


@pytest.fixture()
def presenter():
    return RecordingPresenter()
