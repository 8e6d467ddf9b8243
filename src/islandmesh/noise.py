"""Coherent noise for terrain height synthesis.

Provides vectorized 2-D gradient noise, seeded sampling offsets and the
layered (octave) noise field sampled by the height field.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import TerrainConfig

# Range of the seed-derived perturbation added to the base noise offsets
SEED_OFFSET_RANGE = 100_000

# Fixed lattice permutation, repeated so corner lookups never wrap
_PERMUTATION = np.random.default_rng(0).permutation(256).astype(np.int64)
_PERM_TABLE = np.concatenate([_PERMUTATION, _PERMUTATION])


@dataclass(frozen=True)
class SeededOffset:
    """Noise sampling offset for one generation."""

    offset_x: float
    offset_z: float


def derive_seeded_offset(seed: int, base_x: float = 0.0, base_z: float = 0.0) -> SeededOffset:
    """Perturb the base noise offsets with values drawn from the seed.

    Args:
        seed: Integer seed. Negative seeds are folded into the unsigned range.
        base_x: Base noise offset along x.
        base_z: Base noise offset along z.

    Returns:
        SeededOffset with both perturbations in [-100000, 100000).
    """
    rng = np.random.default_rng(seed % 2**64)
    dx, dz = rng.integers(-SEED_OFFSET_RANGE, SEED_OFFSET_RANGE, size=2)
    return SeededOffset(offset_x=base_x + float(dx), offset_z=base_z + float(dz))


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(t: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    return a + t * (b - a)


def _grad(h: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.float64]:
    # Four diagonal gradients selected by the low hash bits
    u = np.where(h & 1, -x, x)
    v = np.where(h & 2, -y, y)
    return u + v


def perlin_noise(x: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
    """Evaluate 2-D gradient noise remapped to [0, 1].

    Inputs broadcast against each other; scalars give a 0-d array.

    Args:
        x: Sample coordinates along x.
        z: Sample coordinates along z.

    Returns:
        Noise values in [0, 1].
    """
    x = np.asarray(x, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)

    x0 = np.floor(x)
    z0 = np.floor(z)
    xf = x - x0
    zf = z - z0
    xi = x0.astype(np.int64) & 255
    zi = z0.astype(np.int64) & 255

    p = _PERM_TABLE
    aa = p[p[xi] + zi]
    ab = p[p[xi] + zi + 1]
    ba = p[p[xi + 1] + zi]
    bb = p[p[xi + 1] + zi + 1]

    u = _fade(xf)
    v = _fade(zf)

    near = _lerp(u, _grad(aa, xf, zf), _grad(ba, xf - 1.0, zf))
    far = _lerp(u, _grad(ab, xf, zf - 1.0), _grad(bb, xf - 1.0, zf - 1.0))
    n = _lerp(v, near, far)

    return np.clip((n + 1.0) * 0.5, 0.0, 1.0)


class NoiseField:
    """Layered gradient noise sampled at grid coordinates."""

    def __init__(
        self,
        offset: SeededOffset,
        noise_scale: float = 3.5,
        octaves: int = 4,
        persistence: float = 0.25,
        lacunarity: float = 3.0,
    ):
        self.offset = offset
        self.noise_scale = noise_scale
        self.octaves = octaves
        self.persistence = persistence
        self.lacunarity = lacunarity

    @classmethod
    def from_config(cls, config: TerrainConfig, offset: SeededOffset) -> "NoiseField":
        return cls(
            offset=offset,
            noise_scale=config.noise_scale,
            octaves=config.octaves,
            persistence=config.persistence,
            lacunarity=config.lacunarity,
        )

    def sample(self, x: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
        """Sum all octaves at (x, z).

        Each octave contributes at most its amplitude, so the result lies in
        [0, sum(persistence**o)].
        """
        scale = self.noise_scale / 200
        sx = (np.asarray(x, dtype=np.float64) + self.offset.offset_x) * scale
        sz = (np.asarray(z, dtype=np.float64) + self.offset.offset_z) * scale

        total = np.zeros(np.broadcast_shapes(sx.shape, sz.shape), dtype=np.float64)
        for o in range(self.octaves):
            frequency = self.lacunarity**o
            amplitude = self.persistence**o
            total += perlin_noise(sx * frequency, sz * frequency) * amplitude

        return total
