"""Tests for flock metrics."""

import numpy as np
import pytest

from flocksim.analysis.metrics import (
    calculate_centroid,
    calculate_fragmentation,
    calculate_mean_speed,
    calculate_order_parameter,
)


class TestOrderParameter:
    def test_aligned_flock(self):
        vel = np.tile([0.5, 0.5, 0.0], (10, 1))
        assert calculate_order_parameter(vel) == pytest.approx(1.0)

    def test_opposed_pairs(self):
        vel = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
        assert calculate_order_parameter(vel) == pytest.approx(0.0)

    def test_speed_does_not_matter(self):
        vel = np.array([[0.1, 0.0, 0.0], [5.0, 0.0, 0.0]])
        assert calculate_order_parameter(vel) == pytest.approx(1.0)

    def test_stationary(self):
        assert calculate_order_parameter(np.zeros((4, 3))) == 0.0


class TestFragmentation:
    def test_two_groups(self):
        pos = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [100.0, 0.0], [101.0, 0.0]])
        assert calculate_fragmentation(pos, connection_radius=1.5) == (2, 3)

    def test_chain_is_one_group(self):
        """Connectivity is transitive, not pairwise."""
        pos = np.array([[float(i) * 10.0, 0.0] for i in range(6)])
        assert calculate_fragmentation(pos, connection_radius=11.0) == (1, 6)

    def test_all_isolated(self):
        pos = np.array([[0.0, 0.0], [50.0, 0.0], [0.0, 50.0]])
        assert calculate_fragmentation(pos, connection_radius=10.0) == (3, 1)


class TestSummaries:
    def test_mean_speed(self):
        vel = np.array([[3.0, 4.0, 0.0], [0.0, 1.0, 0.0]])
        assert calculate_mean_speed(vel) == pytest.approx(3.0)

    def test_centroid(self):
        pos = np.array([[0.0, 0.0, 0.0], [10.0, 20.0, 0.0]])
        np.testing.assert_allclose(calculate_centroid(pos), [5.0, 10.0, 0.0])
