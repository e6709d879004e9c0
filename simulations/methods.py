# simulations/methods.py

from __future__ import annotations

import random
from typing import Callable, Dict, Hashable, List

from .common import ExperimentSpec, ExperimentResult, Timer

from balanced_outcomes import BalancedOutcomeRandomizer


SimFn = Callable[[ExperimentSpec, int], ExperimentResult]


def simulate_iid(spec: ExperimentSpec, seed: int) -> ExperimentResult:
    """
    IID weighted sampling: every roll is an independent draw proportional to
    the original weights. This is what the balancing randomizer degenerates
    to at bias 0.
    """
    rng = random.Random(seed)
    keys = list(spec.weights)
    total = sum(spec.weights.values())
    history: List[Hashable] = []

    with Timer() as t:
        for _ in range(spec.rolls):
            r = rng.random() * total
            cumulative = 0.0
            chosen = keys[-1]
            for k in keys:
                cumulative += spec.weights[k]
                if cumulative > r:
                    chosen = k
                    break
            history.append(chosen)

    return ExperimentResult(
        method="iid",
        spec=spec,
        history=history,
        runtime_s=t.elapsed_s,
        meta={},
    )


def simulate_balanced(
    spec: ExperimentSpec,
    seed: int,
    bias: float = 1.0,
    repeat_tolerance: float = 1.0,
) -> ExperimentResult:
    """
    Balancing randomizer: probability is redistributed after every roll so
    counts track their targets.
    """
    randomizer = BalancedOutcomeRandomizer(
        spec.weights, seed=seed, bias=bias, repeat_tolerance=repeat_tolerance
    )

    with Timer() as t:
        history = [randomizer.roll() for _ in range(spec.rolls)]

    return ExperimentResult(
        method="balanced",
        spec=spec,
        history=history,
        runtime_s=t.elapsed_s,
        meta={"bias": randomizer.bias, "repeat_tolerance": randomizer.repeat_tolerance},
    )


def simulate_balanced_no_repeat(spec: ExperimentSpec, seed: int, bias: float = 1.0) -> ExperimentResult:
    """
    Balancing randomizer with immediate repeats suppressed entirely
    (repeat_tolerance=0).
    """
    result = simulate_balanced(spec, seed, bias=bias, repeat_tolerance=0.0)
    result.method = "balanced_no_repeat"
    return result


# --- Registry / dispatch -----------------------------------------------------

def get_method(name: str) -> Callable[..., ExperimentResult]:
    name = name.strip().lower()
    if name not in METHODS:
        raise ValueError(f"unknown method '{name}'. Available: {sorted(METHODS.keys())}")
    return METHODS[name]


# METHODS maps method name -> function.
# Note: the balanced methods take an extra bias parameter; callers can pass it.
METHODS: Dict[str, Callable[..., ExperimentResult]] = {
    "iid": simulate_iid,
    "balanced": simulate_balanced,
    "balanced_no_repeat": simulate_balanced_no_repeat,
}
