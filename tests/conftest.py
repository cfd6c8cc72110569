"""
Shared fixtures for fuzzgen tests.

Provides a recording registrar standing in for the host test framework,
and raw sources that replace the fuzzer module's random source so draws
can be pinned or counted.
"""

import random
from typing import Callable, List

import pytest

from fuzzgen.core import fuzzer as fuzzer_module
from fuzzgen.core.harness import FuzzCase

SAMPLES = 10_000


class RecordingRegistrar:
    """Collects registrations instead of handing them to pytest."""

    def __init__(self):
        self.cases: List[FuzzCase] = []

    def __call__(self, name: str, body: Callable[[], None]) -> None:
        self.cases.append(FuzzCase(name, body))

    @property
    def names(self) -> List[str]:
        return [case.name for case in self.cases]


class ScriptedSource:
    """Raw source returning a fixed sequence of samples."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls]
        self.calls += 1
        return value


class CountingSource:
    """Raw source that counts how often it is sampled."""

    def __init__(self, seed: int = 0):
        self.rng = random.Random(seed)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.rng.random()


def _sample(fuzzer, count: int = SAMPLES) -> list:
    return [fuzzer_module._generate(fuzzer) for _ in range(count)]


@pytest.fixture
def sample() -> Callable[..., list]:
    """Generate many values from a fuzzer: sample(fuzzer, count=10_000)."""
    return _sample


@pytest.fixture
def registrar() -> RecordingRegistrar:
    return RecordingRegistrar()


@pytest.fixture
def scripted_source(monkeypatch) -> Callable[..., ScriptedSource]:
    """Install a ScriptedSource yielding the given samples in order."""

    def install(*values: float) -> ScriptedSource:
        source = ScriptedSource(values)
        monkeypatch.setattr(fuzzer_module, "_rng", source)
        return source

    return install


@pytest.fixture
def counting_source(monkeypatch) -> CountingSource:
    source = CountingSource()
    monkeypatch.setattr(fuzzer_module, "_rng", source)
    return source
