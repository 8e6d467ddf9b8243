"""Island falloff mask: edge suppression curve and its cache."""

import numpy as np
import structlog
from numpy.typing import ArrayLike, NDArray

logger = structlog.get_logger()


def evaluate_falloff(value: ArrayLike, start: float, end: float) -> NDArray[np.float64]:
    """Evaluate the falloff curve ``v^a / (v^a + (b - b*v)^a)``.

    ``start`` (a) controls the steepness and ``end`` (b) the transition
    point. A zero denominator evaluates to 1.0.

    Args:
        value: Normalized distance from the grid center, in [0, 1].
        start: Curve exponent.
        end: Curve transition scale.

    Returns:
        Falloff values, 0 at the center and 1 at the edge.
    """
    v = np.asarray(value, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        pow_a = np.power(v, start)
        pow_b = np.power(end - end * v, start)
        denom = pow_a + pow_b
        result = np.where(denom == 0, 1.0, pow_a / denom)
    return result


def build_falloff_mask(size: int, start: float, end: float) -> NDArray[np.float32]:
    """Build a square falloff mask indexed as ``mask[x, z]``.

    Distance from the center uses the larger of the two axis distances, so
    iso-lines are squares.

    Args:
        size: Mask dimension (the terrain size).
        start: Falloff curve exponent.
        end: Falloff curve transition scale.

    Returns:
        Array of shape (size, size) with values in [0, 1].
    """
    half = float(size // 2)
    coords = np.abs(np.arange(size, dtype=np.float64) - half) / half

    nx = coords[:, np.newaxis]
    nz = coords[np.newaxis, :]
    value = np.clip(np.maximum(nx, nz), 0.0, 1.0)

    return evaluate_falloff(value, start, end).astype(np.float32)


class FalloffCache:
    """Holds the last built falloff mask and the parameters it was built with.

    The mask is rebuilt only when terrain size, falloff start or falloff end
    change.
    """

    def __init__(self) -> None:
        self._mask: NDArray[np.float32] | None = None
        self._key: tuple[int, float, float] | None = None
        self.build_count = 0

    @property
    def mask(self) -> NDArray[np.float32] | None:
        """Currently cached mask, if any."""
        return self._mask

    @property
    def key(self) -> tuple[int, float, float] | None:
        """(size, start, end) of the cached mask."""
        return self._key

    def is_stale(self, size: int, start: float, end: float) -> bool:
        """Whether a mask for these parameters would need to be rebuilt."""
        return self._mask is None or self._key != (size, start, end)

    def get(self, size: int, start: float, end: float) -> NDArray[np.float32]:
        """Return the mask for these parameters, rebuilding it if stale."""
        if self.is_stale(size, start, end):
            self._mask = build_falloff_mask(size, start, end)
            self._key = (size, start, end)
            self.build_count += 1
            logger.debug(
                "falloff_mask_built",
                size=size,
                start=start,
                end=end,
                build_count=self.build_count,
            )
        return self._mask

    def invalidate(self) -> None:
        """Drop the cached mask."""
        self._mask = None
        self._key = None
