import pytest

from balanced_outcomes import COIN
from simulations.common import (
    ExperimentResult,
    ExperimentSpec,
    common_y_range,
    format_stats_line,
    parse_weights,
    summarize_history,
)
from simulations.methods import METHODS, get_method
from simulations.run import run_experiment, run_pair

ABCD = {"a": 1, "b": 2, "c": 3, "d": 4}


class TestParseWeights:
    def test_strings_and_ints(self):
        assert parse_weights("a=1, b=2.5") == {"a": 1.0, "b": 2.5}
        assert parse_weights("2=1,3=2") == {2: 1.0, 3: 2.0}

    @pytest.mark.parametrize("text", ["", "a", "=1", "a=x", " , "])
    def test_malformed(self, text):
        with pytest.raises(ValueError):
            parse_weights(text)


class TestSpec:
    @pytest.mark.parametrize(
        "weights, rolls",
        [({}, 10), ({"a": -1, "b": 2}, 10), ({"a": 0}, 10), (ABCD, -1)],
    )
    def test_validation(self, weights, rolls):
        with pytest.raises(ValueError):
            ExperimentSpec(weights=weights, rolls=rolls)

    def test_targets(self):
        assert ExperimentSpec(weights=ABCD, rolls=0).targets() == pytest.approx(
            {"a": 0.1, "b": 0.2, "c": 0.3, "d": 0.4}
        )


class TestSummary:
    def test_repeats_and_streaks(self):
        s = summarize_history(["a", "a", "b", "a", "a", "b"], {"a": 1, "b": 1})
        assert s.repeats == 2
        assert s.longest_streak == 2
        assert s.frequencies == pytest.approx({"a": 4 / 6, "b": 2 / 6})
        assert s.max_abs_error == pytest.approx(1 / 6)

    def test_empty(self):
        s = summarize_history([], COIN)
        assert s.repeats == 0
        assert s.longest_streak == 0
        assert s.frequencies == {"heads": 0.0, "tails": 0.0}

    def test_result_checks_counts(self):
        spec = ExperimentSpec(weights=COIN, rolls=3)
        with pytest.raises(ValueError):
            ExperimentResult(method="x", spec=spec, history=["heads", "tails"])
        with pytest.raises(ValueError):
            ExperimentResult(method="x", spec=spec, history=["heads", "tails", "edge"])

    def test_result_counts(self):
        spec = ExperimentSpec(weights=COIN, rolls=3)
        r = ExperimentResult(method="x", spec=spec, history=["heads", "tails", "heads"])
        assert r.counts == {"heads": 2, "tails": 1}


class TestMethods:
    @pytest.mark.parametrize("method", sorted(METHODS))
    def test_each_method_rolls_the_requested_amount(self, method):
        r = run_experiment(method, ABCD, rolls=200, seed=1)
        assert r.method == method
        assert len(r.history) == 200
        assert sum(r.counts.values()) == 200
        assert r.runtime_s is not None
        assert method in format_stats_line(r)

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            get_method("round_robin")

    def test_max_bias_is_exact_on_whole_windows(self):
        r = run_experiment("balanced", ABCD, rolls=100, seed=5, method_kwargs={"bias": 4})
        assert r.counts == {"a": 10, "b": 20, "c": 30, "d": 40}
        assert r.stats.max_abs_error == pytest.approx(0.0, abs=1e-12)

    def test_no_repeat_coin_alternates(self):
        r = run_experiment("balanced_no_repeat", COIN, rolls=50, seed=3)
        assert r.stats.repeats == 0
        assert r.meta["repeat_tolerance"] == 0.0

    def test_iid_is_deterministic_per_seed(self):
        a = run_experiment("iid", ABCD, rolls=50, seed=9)
        b = run_experiment("iid", ABCD, rolls=50, seed=9)
        assert a.history == b.history

    def test_pair_and_shared_range(self):
        ra, rb = run_pair("iid", "balanced", ABCD, rolls=100, seed=2)
        assert (ra.method, rb.method) == ("iid", "balanced")
        low, high = common_y_range([ra, rb])
        assert low == 0.0
        assert high >= 0.4
