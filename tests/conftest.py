from typing import Iterable, List

import pytest

from balanced_outcomes import reset_default_random


class ScriptedRandom:
    """
    Random source that replays a fixed list of values and records how many
    were consumed.
    """

    def __init__(self, values: Iterable[float]):
        self.values: List[float] = list(values)
        self.calls = 0

    def __call__(self) -> float:
        if self.calls >= len(self.values):
            pytest.fail("random source exhausted")
        value = self.values[self.calls]
        self.calls += 1
        return value


def _no_random() -> float:
    pytest.fail("random source should not have been consumed")


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def no_random():
    return _no_random


@pytest.fixture(autouse=True)
def _reset_default_random():
    yield
    reset_default_random()
