import pytest
from typing import Iterable, Sequence

class ScriptedRandom:
    """
    Deterministic random source: random() pops scripted values in order,
    choice() returns the scripted index (0 by default).
    """
    def __init__(self, values: Iterable[float] = (), choice_index: int = 0):
        self.values = list(values)
        self.choice_index = choice_index
        self.choices = []

    def random(self) -> float:
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        return self.values.pop(0)

    def choice(self, seq: Sequence):
        self.choices.append(seq)
        return seq[self.choice_index]

    def push(self, *values: float) -> None:
        self.values.extend(values)

@pytest.fixture
def scripted():
    return ScriptedRandom

class FakeTimer:
    """Records start/cancel calls instead of scheduling anything."""
    def __init__(self):
        self.starts = 0
        self.cancels = 0
        self.running = False

    def start(self) -> None:
        self.starts += 1
        self.running = True

    def cancel(self) -> None:
        self.cancels += 1
        self.running = False

@pytest.fixture
def fake_timer():
    return FakeTimer()
