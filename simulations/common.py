# simulations/common.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Tuple
import time


@dataclass(frozen=True)
class ExperimentSpec:
    """
    Common experiment parameters shared across all simulations.
    """
    weights: Dict[Hashable, float]
    rolls: int

    def __post_init__(self) -> None:
        if not self.weights:
            raise ValueError("weights must be non-empty")
        for key, w in self.weights.items():
            if w < 0:
                raise ValueError(f"weight for {key!r} must be >= 0")
        if sum(self.weights.values()) <= 0:
            raise ValueError("weights must have a total > 0")
        if self.rolls < 0:
            raise ValueError("rolls must be >= 0")

    def targets(self) -> Dict[Hashable, float]:
        """Target frequency of each key (weight / total)."""
        total = sum(self.weights.values())
        return {k: w / total for k, w in self.weights.items()}


@dataclass(frozen=True)
class SummaryStats:
    """
    How far a roll history strays from its target frequencies, and how
    streaky it is.
    """
    frequencies: Dict[Hashable, float]
    errors: Dict[Hashable, float]  # observed - target, per key
    max_abs_error: float
    repeats: int  # immediate repeats (history[i] == history[i - 1])
    longest_streak: int


def summarize_history(history: List[Hashable], weights: Dict[Hashable, float]) -> SummaryStats:
    """
    Compare observed key frequencies in `history` against `weights`.
    An empty history has zero frequency for every key.
    """
    total = sum(weights.values())
    n = len(history)

    counts = {k: 0 for k in weights}
    for key in history:
        counts[key] = counts.get(key, 0) + 1

    frequencies = {}
    errors = {}
    for k, c in counts.items():
        f = c / n if n else 0.0
        frequencies[k] = f
        errors[k] = f - weights.get(k, 0.0) / total

    repeats = 0
    longest = 0
    streak = 0
    previous: Any = object()
    for key in history:
        if key == previous:
            repeats += 1
            streak += 1
        else:
            streak = 1
        if streak > longest:
            longest = streak
        previous = key

    return SummaryStats(
        frequencies=frequencies,
        errors=errors,
        max_abs_error=max(abs(e) for e in errors.values()),
        repeats=repeats,
        longest_streak=longest,
    )


@dataclass
class ExperimentResult:
    """
    Common return type for all simulations.
    """
    method: str
    spec: ExperimentSpec
    history: List[Hashable]

    counts: Dict[Hashable, int] = field(init=False)
    stats: SummaryStats = field(init=False)
    runtime_s: Optional[float] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.counts = {k: 0 for k in self.spec.weights}
        for key in self.history:
            if key not in self.counts:
                raise ValueError(f"history contains unknown key {key!r}")
            self.counts[key] += 1

        self.stats = summarize_history(self.history, self.spec.weights)

        # Sanity: counts should sum to rolls
        expected = self.spec.rolls
        actual = sum(self.counts.values())
        if actual != expected:
            raise ValueError(
                f"counts sum mismatch: expected {expected}, got {actual}"
            )


class Timer:
    """
    Tiny timing helper for simulations.
    Usage:
        with Timer() as t:
            ...
        elapsed = t.elapsed_s
    """
    def __init__(self) -> None:
        self._start: Optional[float] = None
        self.elapsed_s: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._start is not None:
            self.elapsed_s = time.perf_counter() - self._start


def parse_weights(text: str) -> Dict[Hashable, float]:
    """
    Parse "a=1,b=2.5,c=3" into {"a": 1.0, "b": 2.5, "c": 3.0}.
    Keys that look like integers become ints, so "2=1,3=2" matches the dice
    presets.
    """
    weights: Dict[Hashable, float] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        name, sep, value = part.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"expected key=weight, got {part!r}")
        try:
            w = float(value)
        except ValueError:
            raise ValueError(f"weight for {name!r} is not a number: {value!r}") from None

        key: Hashable = int(name) if name.lstrip("-").isdigit() else name
        weights[key] = w

    if not weights:
        raise ValueError("no weights given")
    return weights


def common_y_range(results: List[ExperimentResult]) -> Tuple[float, float]:
    """
    Compute a shared (ymin, ymax) of observed and target frequencies across
    multiple results for 'same y-axis' comparisons.
    """
    if not results:
        raise ValueError("results must be non-empty")

    ymax = 0.0
    for r in results:
        for f in r.stats.frequencies.values():
            if f > ymax:
                ymax = f
        for t in r.spec.targets().values():
            if t > ymax:
                ymax = t
    return 0.0, ymax * 1.1 if ymax > 0 else 1.0


def format_stats_line(r: ExperimentResult) -> str:
    """
    Human-friendly one-liner for printing in compare tools.
    """
    s = r.stats
    return (
        f"{r.method}: max_err={s.max_abs_error:.4f}, repeats={s.repeats}, "
        f"longest_streak={s.longest_streak}"
        + (f", runtime={r.runtime_s:.3f}s" if r.runtime_s is not None else "")
    )
