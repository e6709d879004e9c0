"""
Balanced outcomes: a weighted randomizer that redistributes probability after
every draw so results track their target proportions closely, even over short
windows.

    from balanced_outcomes import BalancedOutcomeRandomizer, COIN

    coin = BalancedOutcomeRandomizer(COIN, keep_history=True)
    coin.flip()
"""

from .balanced_outcome_randomizer import MAX_BIAS, BalancedOutcomeRandomizer
from .errors import (
    BalancedOutcomesError,
    HistoryDisabledError,
    InvalidKeyError,
    NoAvailableOptionsError,
)
from .presets import COIN, DEFAULT_PROPORTIONS, ONE_6_SIDED_DIE, TWO_6_SIDED_DICE
from .random_source import get_default_random, reset_default_random, set_default_random

__version__ = "0.1.0"

__all__ = [
    "BalancedOutcomeRandomizer",
    "MAX_BIAS",
    "BalancedOutcomesError",
    "HistoryDisabledError",
    "InvalidKeyError",
    "NoAvailableOptionsError",
    "COIN",
    "DEFAULT_PROPORTIONS",
    "ONE_6_SIDED_DIE",
    "TWO_6_SIDED_DICE",
    "get_default_random",
    "reset_default_random",
    "set_default_random",
]
