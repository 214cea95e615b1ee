"""Tests for the command line runner and the sweep experiment."""

import numpy as np
import pytest

import main
from experiments.sweep import find_critical_threshold, print_summary, run_sweep


class TestMain:
    def test_headless_run(self, capsys):
        main.main(["--steps", "20", "--seed", "1", "--agents", "8", "--report-every", "10"])
        out = capsys.readouterr().out
        assert "Flocking Config" in out
        assert "Step:     10" in out
        assert "Final state:" in out

    def test_weights_passed_through(self):
        args = main.build_parser().parse_args(["--steps", "5", "--attraction", "250", "--seed", "3"])
        flock = main.run(args)
        assert flock.config.attraction == 250.0
        assert flock.ticks == 5

    def test_out_of_range_warning(self, capsys):
        main.main(["--steps", "1", "--direction", "0", "--report-every", "0"])
        out = capsys.readouterr().out
        assert "outside expected range: direction" in out
        assert "Skipped terms: alignment" in out

    def test_bad_flock_size(self):
        with pytest.raises(ValueError):
            main.main(["--steps", "1", "--agents", "1"])


class TestCriticalThreshold:
    def test_interpolates_downward_crossing(self):
        values = np.array([1.0, 2.0, 3.0])
        cohesion = [1.0, 0.8, 0.2]
        assert find_critical_threshold(values, cohesion, 0.5) == pytest.approx(2.5)

    def test_never_crosses(self):
        assert find_critical_threshold(np.array([1.0, 2.0]), [1.0, 0.9], 0.5) is None

    def test_never_cohesive(self):
        assert find_critical_threshold(np.array([1.0, 2.0]), [0.1, 0.2], 0.5) == 1.0


class TestSweep:
    def test_small_sweep(self, capsys):
        results = run_sweep(n_values=3, n_trials=1, warmup_steps=5, measure_steps=2, n_agents=6)
        assert len(results["values"]) == 3
        assert results["values"][0] == pytest.approx(1.0)
        assert results["values"][-1] == pytest.approx(10000.0)
        assert np.all(results["cluster_mean"] <= 1.0)
        print_summary(results)
        assert "SWEEP RESULTS SUMMARY" in capsys.readouterr().out

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            run_sweep(param="speed")
