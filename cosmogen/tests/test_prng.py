"""
Tests for the PRNG and distribution layer.
"""

import math
import uuid

import pytest
import numpy as np
from cosmogen.core.prng import SeededStream, IdFactory, create_stream, hash_label, normalize_seed
from cosmogen.core.distributions import RandomGenerator, range_sample, range_int, clamp01


class TestSeededStream:
    """Tests for SeededStream."""

    def test_same_seed_same_sequence(self):
        """Two streams from one seed produce identical draws."""
        a = SeededStream("test-seed-123")
        b = SeededStream("test-seed-123")
        assert [a.float() for _ in range(20)] == [b.float() for _ in range(20)]

    def test_create_stream(self):
        assert create_stream("x").float() == SeededStream("x").float()

    def test_different_seeds_differ(self):
        a = SeededStream("alpha")
        b = SeededStream("beta")
        assert [a.float() for _ in range(5)] != [b.float() for _ in range(5)]

    def test_numeric_and_string_seeds(self):
        """Numbers are used directly, strings are hashed."""
        assert normalize_seed(42) == 42
        assert normalize_seed(-7) == 2**64 - 7
        assert normalize_seed(3.9) == 3
        assert normalize_seed("42") == hash_label("42")

    def test_non_finite_seed_rejected(self):
        with pytest.raises(ValueError):
            normalize_seed(float("nan"))

    def test_negative_seed_has_own_lineage(self):
        """-n and n seed different streams."""
        a = SeededStream(7)
        b = SeededStream(-7)
        assert a.entropy != b.entropy
        assert [a.float() for _ in range(5)] != [b.float() for _ in range(5)]

    def test_fork_does_not_advance_parent(self):
        """Forking leaves the parent's cursor untouched."""
        a = SeededStream(1234)
        b = SeededStream(1234)
        a.fork("comets")
        a.fork("rings").float()
        assert a.float() == b.float()

    def test_fork_is_pure_function_of_path(self):
        """Same label from the same lineage yields the same child."""
        root = SeededStream("galaxy")
        root.float()
        root.float()
        child_late = root.fork("belts")
        child_fresh = SeededStream("galaxy").fork("belts")
        assert [child_late.float() for _ in range(5)] == [child_fresh.float() for _ in range(5)]

    def test_sibling_forks_independent(self):
        root = SeededStream(99)
        a = root.fork("rings")
        b = root.fork("comets")
        assert [a.float() for _ in range(5)] != [b.float() for _ in range(5)]

    def test_label_path(self):
        root = SeededStream(1)
        assert root.label_path == "<root>"
        assert root.fork("comets").fork("comet-0").label_path == "comets/comet-0"

    def test_int_inclusive_bounds(self):
        stream = SeededStream(5)
        values = {stream.int(1, 3) for _ in range(500)}
        assert values == {1, 2, 3}

    def test_int_degenerate_range_consumes_nothing(self):
        a = SeededStream(5)
        b = SeededStream(5)
        assert a.int(4, 4) == 4
        assert a.float() == b.float()

    def test_choice_empty_raises(self):
        with pytest.raises(ValueError):
            SeededStream(1).choice([])

    def test_getrandbits_width(self):
        stream = SeededStream(8)
        for k in (1, 31, 64, 128):
            assert 0 <= stream.getrandbits(k) < 2 ** k
        assert stream.getrandbits(0) == 0


class TestIdFactory:
    """Tests for deterministic ids."""

    def test_ids_are_uuid4(self):
        new_id = IdFactory(SeededStream("ids"))
        value = uuid.UUID(new_id())
        assert value.version == 4

    def test_ids_reproducible(self):
        a = IdFactory(SeededStream("x").fork("ids"))
        b = IdFactory(SeededStream("x").fork("ids"))
        assert [a() for _ in range(10)] == [b() for _ in range(10)]

    def test_ids_unique(self):
        new_id = IdFactory(SeededStream(3))
        ids = [new_id() for _ in range(1000)]
        assert len(set(ids)) == len(ids)


class TestRandomGenerator:
    """Tests for the distribution layer."""

    def test_uniform_range(self):
        rng = RandomGenerator.from_seed(1)
        values = np.array([rng.uniform(2.0, 5.0) for _ in range(1000)])
        assert values.min() >= 2.0
        assert values.max() < 5.0

    def test_normal_moments(self):
        rng = RandomGenerator.from_seed(2)
        values = np.array([rng.normal(3.0, 2.0) for _ in range(20000)])
        assert values.mean() == pytest.approx(3.0, abs=0.1)
        assert values.std() == pytest.approx(2.0, abs=0.1)

    def test_log_normal_positive(self):
        rng = RandomGenerator.from_seed(3)
        assert all(rng.log_normal(1.5, 0.8) > 0 for _ in range(500))

    def test_geometric_mean(self):
        """Mean failures before success is (1 - p) / p."""
        rng = RandomGenerator.from_seed(4)
        p = 0.4
        values = np.array([rng.geometric(p) for _ in range(20000)])
        assert values.min() >= 0
        assert values.mean() == pytest.approx((1 - p) / p, rel=0.05)

    def test_geometric_degenerate_consumes_nothing(self):
        """p outside (0, 1) returns 0 without drawing."""
        a = RandomGenerator.from_seed(5)
        b = RandomGenerator.from_seed(5)
        assert a.geometric(0.0) == 0
        assert a.geometric(1.0) == 0
        assert a.geometric(-2.0) == 0
        assert a.float() == b.float()

    def test_poisson_mean(self):
        rng = RandomGenerator.from_seed(6)
        small = np.array([rng.poisson(3.0) for _ in range(10000)])
        large = np.array([rng.poisson(100.0) for _ in range(5000)])
        assert small.mean() == pytest.approx(3.0, rel=0.05)
        assert large.mean() == pytest.approx(100.0, rel=0.05)
        assert rng.poisson(0.0) == 0

    def test_weighted_skips_zero_weights(self):
        rng = RandomGenerator.from_seed(7)
        picks = {rng.weighted(["a", "b", "c"], [0.0, 1.0, 0.0]) for _ in range(200)}
        assert picks == {"b"}

    def test_weighted_frequencies(self):
        rng = RandomGenerator.from_seed(8)
        picks = [rng.weighted([1, 2, 3], [0.65, 0.25, 0.10]) for _ in range(20000)]
        assert picks.count(1) / len(picks) == pytest.approx(0.65, abs=0.02)
        assert picks.count(3) / len(picks) == pytest.approx(0.10, abs=0.02)

    def test_bool_clamps_probability(self):
        rng = RandomGenerator.from_seed(9)
        assert all(rng.bool(1.5) for _ in range(100))
        assert not any(rng.bool(-0.5) for _ in range(100))

    def test_unit_vector_norm(self):
        rng = RandomGenerator.from_seed(10)
        for _ in range(100):
            v = rng.unit_vector()
            assert math.sqrt(sum(c * c for c in v)) == pytest.approx(1.0)

    def test_point_in_sphere_radius(self):
        rng = RandomGenerator.from_seed(11)
        for _ in range(200):
            p = rng.point_in_sphere(5.0)
            assert math.sqrt(sum(c * c for c in p)) <= 5.0 + 1e-9

    def test_seed_value_range(self):
        rng = RandomGenerator.from_seed(12)
        for _ in range(100):
            assert 0 <= rng.seed_value() <= 2147483647

    def test_range_helpers(self):
        rng = RandomGenerator.from_seed(13)
        assert range_sample(rng, (2.0, 2.0)) == 2.0
        assert 1 <= range_int(rng, (1, 4)) <= 4
        assert clamp01(float("nan")) == 0.0
        assert clamp01(3.0) == 1.0
