"""
Process-wide default random source.

Every randomizer resolves its source of uniform [0, 1) values once, at
construction time:

    BalancedOutcomeRandomizer(weights, random=my_fn)   # instance source wins
    BalancedOutcomeRandomizer(weights)                 # uses get_default_random()

Tests can scope a default with set_default_random() / reset_default_random()
without leaking into instances that already exist.
"""

import logging
import random
from typing import Callable

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]

_default_random: RandomSource = random.random


def get_default_random() -> RandomSource:
    return _default_random


def set_default_random(fn: RandomSource) -> None:
    """
    Replace the default source used by randomizers constructed from now on.
    """
    global _default_random

    if not callable(fn):
        raise TypeError("default random source must be callable")

    _default_random = fn
    logger.debug("Default random source set to %r", fn)


def reset_default_random() -> None:
    """Restore the default source to random.random."""
    global _default_random

    _default_random = random.random
    logger.debug("Default random source reset to random.random")
