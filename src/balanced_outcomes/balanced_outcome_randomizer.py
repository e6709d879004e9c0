import logging
import math
import random as _random
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

from .errors import HistoryDisabledError, InvalidKeyError, NoAvailableOptionsError
from .presets import DEFAULT_PROPORTIONS
from .random_source import RandomSource, get_default_random

logger = logging.getLogger(__name__)

MAX_BIAS = 4.0

# Sentinels: None is a perfectly good key, so "no argument" / "no roll yet"
# need their own markers.
_NO_KEY = object()
_NO_ROLL = object()


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


def _derive(
    proportions: Mapping[Hashable, float],
) -> Tuple[Dict[Hashable, float], Dict[Hashable, float], float]:
    """
    Validate a proportion map and compute (copy, probabilities, base value).

    base value = sum(weight_k * probability_k), i.e. the redistribution value
    before the bias multiplier is applied.
    """
    copied: Dict[Hashable, float] = {}
    for key, weight in proportions.items():
        w = float(weight)
        if math.isnan(w) or math.isinf(w):
            raise ValueError(f"weight for {key!r} must be finite, got {weight!r}")
        if w < 0:
            raise ValueError(f"weight for {key!r} must be >= 0, got {weight!r}")
        copied[key] = w

    if not copied:
        raise ValueError("proportions must contain at least one key")

    total = sum(copied.values())
    if total <= 0:
        raise ValueError("proportions must have a total weight > 0")

    probabilities = {key: w / total for key, w in copied.items()}
    base_value = 0.0
    for key, w in copied.items():
        base_value += w * probabilities[key]

    return copied, probabilities, base_value


class BalancedOutcomeRandomizer:
    """
    BalancedOutcomeRandomizer

    A weighted randomizer with memory. Keys are drawn in proportion to their
    *current* weights, and after every draw a fixed amount of weight (the
    redistribution value) is taken from the chosen key and handed back to
    every key in proportion to its original probability:

        current[chosen] -= V
        current[k]      += V * probability[k]     for every key k

    so the chosen key nets -V * (1 - p_chosen) and every other key nets
    +V * p_k. Keys that have come up more often than their share become less
    likely, keys that are "due" become more likely, and observed frequencies
    converge on the target proportions much faster than with independent
    draws.

    V = bias * sum(weight_k * probability_k). The bias multiplier tunes the
    pressure: 0 is plain memoryless weighted sampling, 4 (the constructor
    maximum) forces exact coverage over a window equal to the total weight
    for integer weights.

    Optionally, immediate repeats can be suppressed: with repeat_tolerance t
    a draw equal to the previous roll is kept with probability t and
    otherwise redrawn.
    When the previous roll is the only key the current weights can produce,
    it is accepted outright, without drawing the acceptance value, so the
    loop always terminates.

    This code is:
      - single-threaded
      - not thread-safe
      - deterministic for a given sequence of random values
    """

    default_proportions = DEFAULT_PROPORTIONS

    def __init__(
        self,
        original_proportions: Mapping[Hashable, float],
        random: Optional[RandomSource] = None,
        keep_history: bool = False,
        bias: float = 1.0,
        repeat_tolerance: float = 1.0,
        seed: Optional[int] = None,
    ):
        if random is not None and seed is not None:
            raise ValueError("pass either random or seed, not both")
        if random is not None and not callable(random):
            raise TypeError("random must be a callable returning floats in [0, 1)")

        if seed is not None:
            random = _random.Random(seed).random
        self._random: RandomSource = random if random is not None else get_default_random()

        self._bias = _clamp(bias, 0.0, MAX_BIAS)
        self._repeat_tolerance = _clamp(repeat_tolerance, 0.0, 1.0)

        self._original_proportions: Dict[Hashable, float] = {}
        self._original_probabilities: Dict[Hashable, float] = {}
        self._base_value = 0.0
        self._redistribution_value = 0.0
        self._rebuild(original_proportions)

        self._proportions: Dict[Hashable, float] = dict(self._original_proportions)
        self._previous_roll: Any = _NO_ROLL

        self._keep_history = bool(keep_history)
        self._history_array: List[Hashable] = []
        self._history_mapping: Dict[Hashable, int] = {}
        if self._keep_history:
            self._history_mapping = {key: 0 for key in self._original_proportions}

        logger.debug(
            "Created randomizer: keys=%d bias=%s repeat_tolerance=%s keep_history=%s",
            len(self._original_proportions),
            self._bias,
            self._repeat_tolerance,
            self._keep_history,
        )

    # ------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------

    def roll(
        self,
        key: Any = _NO_KEY,
        *,
        only: Optional[Iterable[Hashable]] = None,
        exclude: Optional[Iterable[Hashable]] = None,
    ) -> Hashable:
        """
        Pick the next outcome and update internal state.

        roll()                  -- weighted draw from every key
        roll(key)               -- force `key`; no draw, no repeat suppression
        roll(only=[...])        -- draw restricted to the given keys
        roll(exclude=[...])     -- draw from every key except the given ones

        `only` is applied first, then `exclude`. Filter entries that are not
        keys are ignored.
        """
        if key is not _NO_KEY:
            if only is not None or exclude is not None:
                raise ValueError("a forced key cannot be combined with only/exclude")
            if key not in self._original_proportions:
                raise InvalidKeyError(key)
            chosen = key
        else:
            active = self._active_keys(only, exclude)
            chosen = self._choose_key(active)
            while not self._pass_criteria(chosen, active):
                chosen = self._choose_key(active)

        self._shift(chosen)
        self._record_accepted(chosen)
        return chosen

    flip = roll
    pick = roll
    select = roll
    choose = roll
    randomize = roll

    def undo(self) -> Hashable:
        """
        Take back the most recent roll and return its key.

        Current proportions and history go back to what they were before
        that roll. The previous-roll marker used for repeat suppression is
        not rewound.
        """
        if not self._keep_history:
            raise HistoryDisabledError("undo() requires keep_history=True")
        if not self._history_array:
            raise IndexError("nothing to undo")

        key = self._history_array.pop()
        self._history_mapping[key] -= 1
        self._reverse_shift(key)

        logger.debug("Undid roll of %r", key)
        return key

    def reset(self) -> None:
        """
        Restore current proportions to the originals and clear history.

        The previous roll, bias and repeat tolerance are left alone.
        """
        self._proportions = dict(self._original_proportions)
        if self._keep_history:
            self._history_array = []
            self._history_mapping = {key: 0 for key in self._original_proportions}

    # ------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------

    def update_proportions(self, new_proportions: Mapping[Hashable, float]) -> None:
        """
        Replace the original proportions wholesale.

        Keys new to the randomizer start at their given weight. Keys that
        already have a current weight keep it, including keys that are being
        dropped: those linger in the current proportions but are never drawn
        again.
        """
        derived = _derive(new_proportions)

        for key, weight in derived[0].items():
            if key not in self._proportions:
                self._proportions[key] = weight

        self._apply(derived)
        logger.debug("Replaced proportions: keys=%d", len(self._original_proportions))

    def add(self, extra_proportions: Mapping[Hashable, float]) -> None:
        """
        Merge keys into the original proportions (existing keys are
        overwritten). Keys without a current weight start at their given one.
        """
        merged = dict(self._original_proportions)
        merged.update(extra_proportions)
        derived = _derive(merged)

        for key in extra_proportions:
            if key not in self._proportions:
                self._proportions[key] = derived[0][key]

        self._apply(derived)
        logger.debug("Added keys %r", list(extra_proportions))

    def remove(self, key: Hashable) -> None:
        """
        Remove a key from future draws. Its current weight is left in place
        but is no longer reachable.
        """
        if key not in self._original_proportions:
            raise InvalidKeyError(key)

        remaining = {k: w for k, w in self._original_proportions.items() if k != key}
        self._apply(_derive(remaining))
        logger.debug("Removed key %r", key)

    def set_bias(self, bias: float) -> None:
        """
        Change the bias multiplier.

        Unlike the constructor, this does NOT clamp to [0, 4].
        """
        self._bias = float(bias)
        self._redistribution_value = self._base_value * self._bias
        logger.debug(
            "Bias set to %s (redistribution value %s)", self._bias, self._redistribution_value
        )

    # ------------------------------------------------------------
    # Introspection (read-only)
    # ------------------------------------------------------------

    @property
    def bias(self) -> float:
        return self._bias

    @property
    def repeat_tolerance(self) -> float:
        return self._repeat_tolerance

    @property
    def redistribution_value(self) -> float:
        return self._redistribution_value

    @property
    def keep_history(self) -> bool:
        return self._keep_history

    @property
    def previous_roll(self) -> Optional[Hashable]:
        """The last accepted key, or None before the first roll."""
        if self._previous_roll is _NO_ROLL:
            return None
        return self._previous_roll

    @property
    def history_array(self) -> List[Hashable]:
        """Every accepted key, oldest first."""
        self._require_history()
        return list(self._history_array)

    @property
    def history_mapping(self) -> Dict[Hashable, int]:
        """Key -> number of times accepted."""
        self._require_history()
        return dict(self._history_mapping)

    def num_keys(self) -> int:
        return len(self._original_proportions)

    def keys(self) -> List[Hashable]:
        return list(self._original_proportions)

    def snapshot_proportions(self) -> Dict[Hashable, float]:
        """
        Return a copy of the current proportions, stale keys included.
        """
        return dict(self._proportions)

    def snapshot_original_proportions(self) -> Dict[Hashable, float]:
        return dict(self._original_proportions)

    def snapshot_probabilities(self) -> Dict[Hashable, float]:
        return dict(self._original_probabilities)

    # ------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------

    def _rebuild(self, proportions: Mapping[Hashable, float]) -> None:
        self._apply(_derive(proportions))

    def _apply(
        self, derived: Tuple[Dict[Hashable, float], Dict[Hashable, float], float]
    ) -> None:
        self._original_proportions, self._original_probabilities, self._base_value = derived
        self._redistribution_value = self._base_value * self._bias

    def _require_history(self) -> None:
        if not self._keep_history:
            raise HistoryDisabledError("history is only kept with keep_history=True")

    def _active_keys(
        self,
        only: Optional[Iterable[Hashable]],
        exclude: Optional[Iterable[Hashable]],
    ) -> List[Hashable]:
        """
        Live keys in insertion order, restricted to `only`, minus `exclude`.
        """
        active = list(self._original_proportions)
        if only is not None:
            allowed = set(only)
            active = [k for k in active if k in allowed]
        if exclude is not None:
            excluded = set(exclude)
            active = [k for k in active if k not in excluded]

        if not active:
            raise NoAvailableOptionsError("no available options to choose from")
        return active

    def _max_weight_key(self, active: List[Hashable]) -> Hashable:
        # max() keeps the first of equal elements
        return max(active, key=lambda k: self._proportions[k])

    def _choose_key(self, active: List[Hashable]) -> Hashable:
        """
        Pick one of `active` with probability proportional to its current
        weight.
        """
        total = 0.0
        for k in active:
            total += self._proportions[k]

        # Shifting can push weights negative; with nothing positive to draw
        # from, fall back to the heaviest key without consuming randomness.
        if total <= 0:
            key = self._max_weight_key(active)
            logger.debug("Non-positive total %s over %r, choosing %r", total, active, key)
            return key

        r = self._random() * total
        cumulative = 0.0

        for k in active:
            cumulative += self._proportions[k]
            if cumulative > r:
                return k

        # Numerical fallback
        return active[-1]

    def _drawable_keys(self, active: List[Hashable]) -> List[Hashable]:
        """
        Keys of `active` that _choose_key() can return with the current
        weights.

        Key k is returned for r in [max(0, highest earlier cumulative),
        min(cumulative_k, total)), so it is drawable iff that interval is
        non-empty.
        """
        total = 0.0
        for k in active:
            total += self._proportions[k]
        if total <= 0:
            return [self._max_weight_key(active)]

        drawable = []
        floor = 0.0
        cumulative = 0.0
        for k in active:
            cumulative += self._proportions[k]
            if floor < cumulative and floor < total:
                drawable.append(k)
            floor = max(floor, cumulative)

        if not drawable:
            drawable.append(active[-1])
        return drawable

    def _pass_criteria(self, candidate: Hashable, active: List[Hashable]) -> bool:
        """
        Decide whether `candidate` survives repeat suppression.
        """
        if self._repeat_tolerance >= 1:
            return True
        if self._previous_roll is _NO_ROLL or candidate != self._previous_roll:
            return True

        # Nothing else can come up: accepting is the only way to terminate.
        if self._drawable_keys(active) == [candidate]:
            return True

        if self._random() < self._repeat_tolerance:
            return True

        logger.debug("Rejected repeat of %r, redrawing", candidate)
        return False

    def _shift(self, key: Hashable) -> None:
        value = self._redistribution_value
        self._proportions[key] -= value
        for k, p in self._original_probabilities.items():
            self._proportions[k] += value * p

    def _reverse_shift(self, key: Hashable) -> None:
        value = self._redistribution_value
        self._proportions[key] += value
        for k, p in self._original_probabilities.items():
            self._proportions[k] -= value * p

    def _record_accepted(self, key: Hashable) -> None:
        self._previous_roll = key
        if self._keep_history:
            self._history_array.append(key)
            self._history_mapping[key] = self._history_mapping.get(key, 0) + 1
