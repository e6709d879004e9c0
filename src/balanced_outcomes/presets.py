from typing import Dict, Hashable

# Plain data tables; randomizers copy whatever they are given.

ONE_6_SIDED_DIE: Dict[Hashable, float] = {1: 1, 2: 1, 3: 1, 4: 1, 5: 1, 6: 1}

# Sum of two dice: weight = number of ways to roll that total out of 36.
TWO_6_SIDED_DICE: Dict[Hashable, float] = {
    2: 1,
    3: 2,
    4: 3,
    5: 4,
    6: 5,
    7: 6,
    8: 5,
    9: 4,
    10: 3,
    11: 2,
    12: 1,
}

COIN: Dict[Hashable, float] = {"heads": 1, "tails": 1}

DEFAULT_PROPORTIONS: Dict[str, Dict[Hashable, float]] = {
    "one_6_sided_die": ONE_6_SIDED_DIE,
    "two_6_sided_dice": TWO_6_SIDED_DICE,
    "coin": COIN,
}
