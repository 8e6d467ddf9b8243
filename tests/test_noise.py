"""Tests for noise generation."""

import numpy as np
import pytest

from islandmesh.noise import (
    NoiseField,
    SeededOffset,
    derive_seeded_offset,
    perlin_noise,
)


class TestPerlinNoise:
    """Tests for the gradient noise primitive."""

    def test_output_range(self) -> None:
        """Values lie in [0, 1]."""
        rng = np.random.default_rng(7)
        x = rng.uniform(-5000, 5000, 10_000)
        z = rng.uniform(-5000, 5000, 10_000)
        result = perlin_noise(x, z)
        assert result.min() >= 0.0
        assert result.max() <= 1.0

    def test_deterministic(self) -> None:
        """Same coordinates give identical values."""
        x = np.linspace(0, 20, 101)
        np.testing.assert_array_equal(perlin_noise(x, x * 0.3), perlin_noise(x, x * 0.3))

    def test_lattice_points_are_midpoint(self) -> None:
        """Gradient noise is zero on integer lattice points, i.e. 0.5 after remap."""
        x, z = np.meshgrid(np.arange(-4, 5), np.arange(-4, 5))
        np.testing.assert_allclose(perlin_noise(x, z), 0.5)

    def test_continuous(self) -> None:
        """Tiny coordinate steps give tiny value changes."""
        x = np.linspace(0.0, 10.0, 1000)
        z = np.full_like(x, 3.7)
        delta = np.abs(perlin_noise(x + 1e-5, z) - perlin_noise(x, z))
        assert delta.max() < 1e-3

    def test_not_constant(self) -> None:
        """Off-lattice samples vary."""
        x = np.linspace(0.1, 30.1, 300)
        result = perlin_noise(x, x * 0.7 + 0.33)
        assert result.std() > 0.01

    def test_scalar_input(self) -> None:
        """Scalars give a 0-d array."""
        result = perlin_noise(0.3, 0.7)
        assert result.shape == ()

    def test_broadcasting(self) -> None:
        """Row and column coordinates broadcast to a grid."""
        xs = np.arange(5)[np.newaxis, :] + 0.5
        zs = np.arange(3)[:, np.newaxis] + 0.25
        assert perlin_noise(xs, zs).shape == (3, 5)


class TestSeededOffset:
    """Tests for seed-derived noise offsets."""

    def test_deterministic(self) -> None:
        """Same seed gives the same offset."""
        assert derive_seeded_offset(123) == derive_seeded_offset(123)

    def test_different_seeds_differ(self) -> None:
        """Different seeds give different offsets."""
        assert derive_seeded_offset(1) != derive_seeded_offset(2)

    def test_range(self) -> None:
        """Perturbations stay within [-100000, 100000)."""
        for seed in range(50):
            offset = derive_seeded_offset(seed)
            assert -100_000 <= offset.offset_x < 100_000
            assert -100_000 <= offset.offset_z < 100_000

    def test_base_offsets_added(self) -> None:
        """Base offsets shift the seeded offset exactly."""
        base = derive_seeded_offset(9)
        shifted = derive_seeded_offset(9, base_x=10.0, base_z=-20.0)
        assert shifted.offset_x == base.offset_x + 10.0
        assert shifted.offset_z == base.offset_z - 20.0

    def test_negative_seed(self) -> None:
        """Negative seeds are accepted and deterministic."""
        assert derive_seeded_offset(-5) == derive_seeded_offset(-5)
        assert derive_seeded_offset(-5) != derive_seeded_offset(5)


class TestNoiseField:
    """Tests for octave noise sampling."""

    @pytest.fixture
    def offset(self) -> SeededOffset:
        return SeededOffset(offset_x=1234.0, offset_z=-567.0)

    def test_single_octave_matches_primitive(self, offset: SeededOffset) -> None:
        """One octave is the gradient noise at scaled, offset coordinates."""
        field = NoiseField(offset, noise_scale=3.5, octaves=1)
        xs = np.arange(20)
        expected = perlin_noise(
            (xs + offset.offset_x) * (3.5 / 200), (7 + offset.offset_z) * (3.5 / 200)
        )
        np.testing.assert_allclose(field.sample(xs, 7), expected)

    def test_range_bounded_by_amplitudes(self, offset: SeededOffset) -> None:
        """Octave sum lies in [0, sum of amplitudes]."""
        field = NoiseField(offset, noise_scale=50.0, octaves=4, persistence=0.5, lacunarity=2.0)
        zs, xs = np.meshgrid(np.arange(64), np.arange(64), indexing="ij")
        result = field.sample(xs, zs)
        assert result.min() >= 0.0
        assert result.max() <= 1.0 + 0.5 + 0.25 + 0.125

    def test_zero_persistence_keeps_first_octave(self, offset: SeededOffset) -> None:
        """With zero persistence only the first octave contributes."""
        single = NoiseField(offset, noise_scale=10.0, octaves=1)
        layered = NoiseField(offset, noise_scale=10.0, octaves=5, persistence=0.0)
        xs = np.arange(32)
        np.testing.assert_allclose(single.sample(xs, 3), layered.sample(xs, 3))

    def test_deterministic(self, offset: SeededOffset) -> None:
        """Same field gives identical samples."""
        field = NoiseField(offset, octaves=4)
        xs = np.arange(50)
        np.testing.assert_array_equal(field.sample(xs, 11), field.sample(xs, 11))

    def test_offset_changes_output(self) -> None:
        """Different offsets sample different terrain."""
        a = NoiseField(SeededOffset(0.0, 0.0), noise_scale=30.0)
        b = NoiseField(SeededOffset(5000.5, 123.25), noise_scale=30.0)
        xs = np.arange(64)
        assert not np.allclose(a.sample(xs, 5), b.sample(xs, 5))
