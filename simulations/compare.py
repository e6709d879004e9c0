# simulations/compare.py

from __future__ import annotations

import argparse
import logging
import sys

import matplotlib.pyplot as plt

from balanced_outcomes import DEFAULT_PROPORTIONS

from .common import ExperimentResult, common_y_range, format_stats_line, parse_weights
from .run import run_pair


# Keep the tool intentionally opinionated:
# - seed is fixed unless you edit the file
# - bias/rolls have defaults that show the effect clearly
DEFAULT_SEED = 42
DEFAULT_BIAS = 1.0
DEFAULT_ROLLS = 100


def _method_kwargs(method_name: str, bias: float):
    """
    Only the balanced methods take extra kwargs (bias).
    """
    name = method_name.strip().lower()
    if name.startswith("balanced"):
        return {"bias": bias}
    return {}


def _plot(ax, r: ExperimentResult, ylim) -> None:
    keys = list(r.spec.weights)
    labels = [str(k) for k in keys]
    targets = r.spec.targets()
    xs = range(len(keys))

    ax.bar(xs, [r.stats.frequencies[k] for k in keys], label="observed")
    ax.plot(xs, [targets[k] for k in keys], "k_", markersize=20, mew=2, label="target")
    ax.set_xticks(list(xs))
    ax.set_xticklabels(labels)
    ax.set_ylim(*ylim)
    ax.set_title(f"{r.method} (max err {r.stats.max_abs_error:.3f})")
    ax.set_xlabel("Outcome")


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        description="Compare two roll methods via Monte Carlo (same y-axis plots)."
    )
    parser.add_argument("--method-a", required=True, help="e.g. iid | balanced | balanced_no_repeat")
    parser.add_argument("--method-b", required=True, help="e.g. iid | balanced | balanced_no_repeat")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--weights", help='e.g. "a=1,b=2,c=3,d=4"')
    source.add_argument("--preset", choices=sorted(DEFAULT_PROPORTIONS), help="named default proportions")
    parser.add_argument("--rolls", type=int, default=DEFAULT_ROLLS, help="number of rolls")
    parser.add_argument("--bias", type=float, default=DEFAULT_BIAS, help="bias for balanced methods")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ...")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.preset:
        weights = DEFAULT_PROPORTIONS[args.preset]
    else:
        try:
            weights = parse_weights(args.weights)
        except ValueError as e:
            parser.error(str(e))

    # Run both experiments
    ra, rb = run_pair(
        method_a=args.method_a,
        method_b=args.method_b,
        weights=weights,
        rolls=args.rolls,
        seed=DEFAULT_SEED,
        method_kwargs_a=_method_kwargs(args.method_a, args.bias),
        method_kwargs_b=_method_kwargs(args.method_b, args.bias),
    )

    # Print stats
    print(format_stats_line(ra))
    print(format_stats_line(rb))

    # Plot with same y-axis
    ylim = common_y_range([ra, rb])

    fig, (ax_a, ax_b) = plt.subplots(1, 2, figsize=(12, 4))
    _plot(ax_a, ra, ylim)
    ax_a.set_ylabel("Frequency")
    ax_a.legend()
    _plot(ax_b, rb, ylim)

    fig.suptitle(
        f"Compare: {ra.method} vs {rb.method}  (rolls={args.rolls}, bias={args.bias})"
    )
    fig.tight_layout(rect=[0, 0.02, 1, 0.92])
    plt.show()

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
