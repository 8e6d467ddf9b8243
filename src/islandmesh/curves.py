"""Height remapping curves.

A height curve is any object with an ``evaluate(t)`` method over the domain
[0, 1]. The generator treats it as opaque. ``KeyframeCurve`` provides the usual
editor-style curve: cubic Hermite segments between keyframes with one tangent
per key, holding the first/last value outside the key range.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from pydantic import BaseModel, Field
from scipy.interpolate import CubicHermiteSpline

from .exceptions import ConfigurationError


class Keyframe(BaseModel, frozen=True):
    """A single curve key."""

    time: float = Field(description="Position of the key on the curve domain")
    value: float = Field(description="Curve value at this key")
    tangent: float = Field(default=0.0, description="Slope of the curve at this key")


class HeightCurve(ABC):
    """Sampling function used to reshape normalized heights."""

    @abstractmethod
    def evaluate(self, t: ArrayLike) -> NDArray[np.float64]:
        """Evaluate the curve at ``t`` (scalar or array)."""


class KeyframeCurve(HeightCurve):
    """Piecewise cubic Hermite curve through a set of keyframes."""

    def __init__(self, keys: Iterable[Keyframe]):
        self.keys: tuple[Keyframe, ...] = tuple(sorted(keys, key=lambda k: k.time))
        if not self.keys:
            raise ConfigurationError("Height curve needs at least one keyframe")

        times = np.array([k.time for k in self.keys], dtype=np.float64)
        if np.any(np.diff(times) <= 0):
            raise ConfigurationError(
                f"Height curve keyframe times must be distinct, got {times.tolist()}"
            )

        self._t_min = float(times[0])
        self._t_max = float(times[-1])

        # A single key is a constant curve
        if len(self.keys) == 1:
            self._spline = None
        else:
            self._spline = CubicHermiteSpline(
                times,
                np.array([k.value for k in self.keys], dtype=np.float64),
                np.array([k.tangent for k in self.keys], dtype=np.float64),
            )

    @classmethod
    def linear(
        cls,
        time_start: float = 0.0,
        value_start: float = 0.0,
        time_end: float = 1.0,
        value_end: float = 1.0,
    ) -> "KeyframeCurve":
        """Straight line between two keys."""
        slope = (value_end - value_start) / (time_end - time_start)
        return cls([
            Keyframe(time=time_start, value=value_start, tangent=slope),
            Keyframe(time=time_end, value=value_end, tangent=slope),
        ])

    @classmethod
    def ease_in_out(
        cls,
        time_start: float = 0.0,
        value_start: float = 0.0,
        time_end: float = 1.0,
        value_end: float = 1.0,
    ) -> "KeyframeCurve":
        """S-shaped curve with flat tangents at both ends."""
        return cls([
            Keyframe(time=time_start, value=value_start),
            Keyframe(time=time_end, value=value_end),
        ])

    def evaluate(self, t: ArrayLike) -> NDArray[np.float64]:
        t = np.clip(np.asarray(t, dtype=np.float64), self._t_min, self._t_max)
        if self._spline is None:
            return np.full_like(t, self.keys[0].value)
        return self._spline(t)

    def to_keyframes(self) -> list[dict[str, float]]:
        """Keyframes as plain dicts, in the form accepted by TOML configs."""
        return [k.model_dump() for k in self.keys]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyframeCurve):
            return NotImplemented
        return self.keys == other.keys

    def __hash__(self) -> int:
        return hash(self.keys)

    def __repr__(self) -> str:
        return f"KeyframeCurve({len(self.keys)} keys)"


class CallableCurve(HeightCurve):
    """Adapts a plain ``float -> float`` function to the curve interface."""

    def __init__(self, func: Callable[[float], float]):
        self.func = func
        self._vectorized = np.vectorize(func, otypes=[np.float64])

    def evaluate(self, t: ArrayLike) -> NDArray[np.float64]:
        return self._vectorized(np.asarray(t, dtype=np.float64))

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", type(self.func).__name__)
        return f"CallableCurve({name})"


def coerce_curve(
    value: HeightCurve | Callable[[float], float] | Sequence[Keyframe | dict],
) -> HeightCurve:
    """Build a HeightCurve from a curve, a callable, or a keyframe list.

    Raises:
        ConfigurationError: If the value can't be turned into a curve.
    """
    if isinstance(value, HeightCurve):
        return value
    if callable(value):
        return CallableCurve(value)
    if isinstance(value, (list, tuple)):
        keys = [k if isinstance(k, Keyframe) else Keyframe.model_validate(k) for k in value]
        return KeyframeCurve(keys)
    raise ConfigurationError(f"Unsupported height curve: {value!r}")
