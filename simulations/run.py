# simulations/run.py

from __future__ import annotations

from typing import Any, Dict, Hashable, Mapping, Optional

from .common import ExperimentSpec, ExperimentResult
from .methods import get_method


def run_experiment(
    method: str,
    weights: Mapping[Hashable, float],
    rolls: int,
    seed: int = 42,
    method_kwargs: Optional[Dict[str, Any]] = None,
) -> ExperimentResult:
    """
    Run a single simulation and return an ExperimentResult.

    Parameters
    ----------
    method:
        Name of the method (e.g., 'iid', 'balanced', 'balanced_no_repeat').
    weights:
        Target proportions, key -> weight.
    rolls:
        Number of rolls.
    seed:
        RNG seed.
    method_kwargs:
        Optional dict of method-specific kwargs (e.g., {'bias': 2.0}).

    Returns
    -------
    ExperimentResult
    """
    spec = ExperimentSpec(weights=dict(weights), rolls=rolls)
    fn = get_method(method)

    kwargs = method_kwargs or {}
    result = fn(spec, seed, **kwargs)
    return result


def run_pair(
    method_a: str,
    method_b: str,
    weights: Mapping[Hashable, float],
    rolls: int,
    seed: int = 42,
    method_kwargs_a: Optional[Dict[str, Any]] = None,
    method_kwargs_b: Optional[Dict[str, Any]] = None,
):
    """
    Convenience helper: run two methods under the same spec and seed.

    Returns (result_a, result_b).
    """
    ra = run_experiment(
        method=method_a,
        weights=weights,
        rolls=rolls,
        seed=seed,
        method_kwargs=method_kwargs_a,
    )
    rb = run_experiment(
        method=method_b,
        weights=weights,
        rolls=rolls,
        seed=seed,
        method_kwargs=method_kwargs_b,
    )
    return ra, rb
