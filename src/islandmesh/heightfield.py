"""Height field: noise, island falloff and height curve combined per cell."""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .curves import HeightCurve
from .noise import NoiseField


class HeightField:
    """Scalar terrain height for integer grid coordinates.

    Heights are computed as::

        y = noise(x, z)
        y = clamp01(y - falloff[x, z])      # only with a falloff mask
        y = y * curve(y) * height_multiplier

    The curve is evaluated on the falloff-adjusted height and its result
    multiplies that same height.
    """

    def __init__(
        self,
        noise: NoiseField,
        height_curve: HeightCurve,
        height_multiplier: float,
        falloff_mask: NDArray[np.float32] | None = None,
    ):
        self.noise = noise
        self.height_curve = height_curve
        self.height_multiplier = height_multiplier
        self.falloff_mask = falloff_mask

    def normalized_heights(self, xs: ArrayLike, zs: ArrayLike) -> NDArray[np.float64]:
        """Noise minus falloff, before the height curve is applied.

        With a falloff mask the result is clamped to [0, 1]; without one it is
        the raw octave sum.
        """
        xs = np.asarray(xs)
        zs = np.asarray(zs)
        y = self.noise.sample(xs, zs)

        if self.falloff_mask is not None:
            size_x, size_z = self.falloff_mask.shape
            fx = np.clip(xs, 0, size_x - 1).astype(np.int64)
            fz = np.clip(zs, 0, size_z - 1).astype(np.int64)
            y = y - self.falloff_mask[fx, fz]
            y = np.clip(y, 0.0, 1.0)

        return y

    def heights(self, xs: ArrayLike, zs: ArrayLike) -> NDArray[np.float64]:
        """Final heights for broadcastable coordinate arrays."""
        y = self.normalized_heights(xs, zs)
        return y * self.height_curve.evaluate(y) * self.height_multiplier

    def height_at(self, x: int, z: int) -> float:
        """Final height of a single cell."""
        return float(self.heights(x, z))
