"""Tests for the stream-separated deterministic RNG."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dessim.core.enums import Stream
from dessim.systems.rng import DeterministicRNG


class TestDeterminism:

    def test_same_inputs_same_output(self):
        a, b = DeterministicRNG(7), DeterministicRNG(7)
        for counter in range(50):
            assert a.next_float(Stream.ARRIVAL, 3, counter) == b.next_float(Stream.ARRIVAL, 3, counter)

    def test_streams_are_independent(self):
        rng = DeterministicRNG(7)
        arrivals = [rng.next_float(Stream.ARRIVAL, 0, c) for c in range(20)]
        services = [rng.next_float(Stream.SERVICE, 0, c) for c in range(20)]
        assert arrivals != services

    def test_seed_changes_sequence(self):
        first = [DeterministicRNG(1).next_float(Stream.GENERAL, 0, c) for c in range(20)]
        second = [DeterministicRNG(2).next_float(Stream.GENERAL, 0, c) for c in range(20)]
        assert first != second
        assert DeterministicRNG(5).seed == 5


class TestRanges:

    def test_float_in_unit_interval(self):
        rng = DeterministicRNG(42)
        values = [rng.next_float(Stream.GENERAL, 1, c) for c in range(1000)]
        assert all(0.0 <= v < 1.0 for v in values)

    def test_int_inclusive_bounds(self):
        rng = DeterministicRNG(42)
        values = {rng.next_int(Stream.GENERAL, 1, c, 2, 4) for c in range(500)}
        assert values == {2, 3, 4}

    def test_bool_probability_extremes(self):
        rng = DeterministicRNG(42)
        assert not any(rng.next_bool(Stream.FAILURE, 0, c, 0.0) for c in range(100))
        assert all(rng.next_bool(Stream.FAILURE, 0, c, 1.0) for c in range(100))


class TestDistributions:

    def test_exponential_mean(self):
        rng = DeterministicRNG(42)
        n = 4000
        mean = sum(rng.exponential(Stream.ARRIVAL, 0, c, 2.0) for c in range(n)) / n
        assert mean == pytest.approx(2.0, rel=0.1)

    def test_exponential_non_negative(self):
        rng = DeterministicRNG(3)
        assert all(rng.exponential(Stream.REPAIR, 0, c, 0.5) >= 0 for c in range(500))

    def test_normal_mean(self):
        rng = DeterministicRNG(42)
        n = 4000
        mean = sum(rng.normal(Stream.SERVICE, 0, c, 10.0, 1.0) for c in range(n)) / n
        assert mean == pytest.approx(10.0, abs=0.15)

    def test_zero_sigma_is_constant(self):
        rng = DeterministicRNG(42)
        assert rng.normal(Stream.SERVICE, 0, 5, 3.0, 0.0) == 3.0

    def test_invalid_parameters(self):
        rng = DeterministicRNG(42)
        with pytest.raises(ValueError):
            rng.exponential(Stream.ARRIVAL, 0, 0, 0.0)
        with pytest.raises(ValueError):
            rng.normal(Stream.SERVICE, 0, 0, 1.0, -1.0)
