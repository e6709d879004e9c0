import random

import pytest

from balanced_outcomes import (
    BalancedOutcomeRandomizer,
    get_default_random,
    reset_default_random,
    set_default_random,
)


def test_default_is_stdlib_random():
    assert get_default_random() is random.random


def test_set_and_reset():
    fn = lambda: 0.25  # noqa: E731
    set_default_random(fn)
    assert get_default_random() is fn
    reset_default_random()
    assert get_default_random() is random.random


def test_rejects_non_callable():
    with pytest.raises(TypeError):
        set_default_random(0.5)
    assert get_default_random() is random.random


def test_resolved_at_construction(scripted):
    before = BalancedOutcomeRandomizer({"a": 1, "b": 1}, seed=1)
    source = scripted([0.9, 0.9])
    set_default_random(source)
    after = BalancedOutcomeRandomizer({"a": 1, "b": 1})

    before.roll()
    assert source.calls == 0
    assert after.roll() == "b"
    assert source.calls == 1

    reset_default_random()
    # still bound to the source it was built with
    after.roll()
    assert source.calls == 2


def test_instance_source_overrides_default(scripted, no_random):
    set_default_random(no_random)
    r = BalancedOutcomeRandomizer({"a": 1, "b": 1}, random=scripted([0.1]))
    assert r.roll() == "a"


def test_seed_overrides_default(no_random):
    set_default_random(no_random)
    r = BalancedOutcomeRandomizer({"a": 1, "b": 1}, seed=3)
    assert r.roll() in ("a", "b")
