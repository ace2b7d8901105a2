"""
Immutable per-axis operator specifications.

This module provides the frozen dataclasses the filters are built from:

- ``Kernel``: finite correlation weights plus an origin offset
- ``RecursiveFilter``: IIR poles plus a normalizing gain
- ``RankWindow``: running minimum/maximum window

Everything that can be validated without seeing the data is validated in
``__post_init__``, so an invalid operator cannot be constructed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from ndfilter.boundary import BoundaryMode, check_extent
from ndfilter.constants import (
    IIR_TOLERANCE,
    SPLINE_POLES,
    SYMMETRY_ANTISYMMETRIC,
    SYMMETRY_NONE,
    SYMMETRY_SYMMETRIC,
)
from ndfilter.errors import InvalidExtent, InvalidKernel, UnstableFilter


def check_origin(size: int, origin: int) -> None:
    if not -(size // 2) <= origin <= (size - 1) // 2:
        raise InvalidKernel(
            f"origin={origin} is out of range for a window of length {size}; "
            f"it must satisfy -(len // 2) <= origin <= (len - 1) // 2"
        )


@dataclass(frozen=True)
class Kernel:
    """
    Correlation kernel along one axis.

    Output ``i`` of a line is ``sum_j weights[j] * x[i + j - left]`` with
    ``left = len(weights) // 2 + origin``; positions outside the line are
    resolved by the boundary mode. Positive origins shift the kernel to
    the left.

    Attributes:
        weights: Kernel weights (stored as a tuple, never mutated)
        origin: Offset of the anchor from the kernel center

    Example:
        >>> k = Kernel((1.0, 2.0, 1.0))
        >>> k.left, k.right
        (1, 1)
        >>> Kernel.convolution((1.0, 3.0)).weights
        (3.0, 1.0)
    """

    weights: tuple
    origin: int = 0

    def __post_init__(self):
        """Validate weights and origin."""
        weights = np.asarray(self.weights)
        if weights.ndim == 0:
            weights = weights.reshape(1)
        if weights.ndim != 1:
            raise InvalidKernel(f"weights must be 1-D, got shape {weights.shape}")
        if weights.size == 0:
            raise InvalidKernel("No filter weights given")
        if not np.issubdtype(weights.dtype, np.number):
            raise InvalidKernel(f"weights must be numeric, got dtype {weights.dtype}")
        if not np.all(np.isfinite(weights)):
            raise InvalidKernel("weights must be finite")

        object.__setattr__(self, "weights", tuple(weights.tolist()))
        object.__setattr__(self, "origin", int(self.origin))
        check_origin(len(self.weights), self.origin)

    @classmethod
    def convolution(cls, weights, origin: int = 0) -> Kernel:
        """
        Build the correlation kernel equivalent to convolving with ``weights``.

        Convolution traverses the kernel in reverse; the origin is mirrored,
        and even-length kernels shift by one more sample so the anchor stays
        on the same input position.
        """
        weights = np.asarray(weights)
        if weights.ndim == 0:
            weights = weights.reshape(1)
        origin = -int(origin)
        if weights.shape[0] % 2 == 0:
            origin -= 1
        return cls(tuple(weights[::-1].tolist()), origin)

    @property
    def size(self) -> int:
        """Number of weights."""
        return len(self.weights)

    @property
    def left(self) -> int:
        """Samples read before the output position."""
        return self.size // 2 + self.origin

    @property
    def right(self) -> int:
        """Samples read after the output position."""
        return self.size - 1 - self.left

    @property
    def is_complex(self) -> bool:
        return any(isinstance(w, complex) for w in self.weights)

    @property
    def symmetry(self) -> int:
        """
        Symmetry class of an odd-length kernel.

        Returns:
            SYMMETRY_SYMMETRIC, SYMMETRY_ANTISYMMETRIC or SYMMETRY_NONE
        """
        n = self.size
        if n % 2 == 0 or n == 1 or self.is_complex:
            return SYMMETRY_NONE

        w = np.asarray(self.weights, dtype=np.float64)
        half = n // 2
        upper = w[half + 1 :]
        lower = w[half - 1 :: -1]
        eps = np.finfo(np.float64).eps
        if np.all(np.abs(upper - lower) <= eps):
            return SYMMETRY_SYMMETRIC
        if np.all(np.abs(upper + lower) <= eps):
            return SYMMETRY_ANTISYMMETRIC
        return SYMMETRY_NONE

    def as_array(self, dtype) -> np.ndarray:
        """Weights as a fresh array of ``dtype``."""
        return np.array(self.weights, dtype=dtype)

    def validate(self, extent: int, mode: BoundaryMode) -> None:
        check_extent(extent, mode)


@dataclass(frozen=True)
class RankWindow:
    """
    Running minimum or maximum over a window of ``size`` samples.

    The window covers the same positions as a Kernel of the same size and
    origin.
    """

    size: int
    origin: int = 0
    maximum: bool = True

    def __post_init__(self):
        """Validate size and origin."""
        if isinstance(self.size, bool) or int(self.size) != self.size:
            raise InvalidKernel(f"size must be an integer, got {self.size!r}")
        object.__setattr__(self, "size", int(self.size))
        object.__setattr__(self, "origin", int(self.origin))
        if self.size < 1:
            raise InvalidKernel(f"Incorrect filter size ({self.size})")
        check_origin(self.size, self.origin)

    @property
    def left(self) -> int:
        return self.size // 2 + self.origin

    @property
    def right(self) -> int:
        return self.size - 1 - self.left

    def validate(self, extent: int, mode: BoundaryMode) -> None:
        check_extent(extent, mode)


def pole_horizon(pole) -> int:
    """
    Number of samples after which ``pole**k`` falls below IIR_TOLERANCE.

    A zero pole has horizon 0.
    """
    magnitude = abs(pole)
    if magnitude == 0:
        return 0
    return int(math.ceil(math.log(IIR_TOLERANCE)) / math.log(magnitude))


def _default_gain(poles: tuple) -> float | complex:
    gain = 1.0
    for pole in poles:
        if pole != 0:
            gain *= (1.0 - pole) * (1.0 - 1.0 / pole)
    return gain


@dataclass(frozen=True)
class RecursiveFilter:
    """
    Symmetric recursive (IIR) filter defined by its poles.

    Each pole contributes a causal pass ``y[i] = x[i] + z y[i-1]`` and an
    anti-causal pass ``y[i] = z (y[i+1] - y[i])``. The default gain,
    ``prod((1 - z)(1 - 1/z))``, gives the cascade unit DC gain.

    Attributes:
        poles: Real or complex poles, each with magnitude < 1
        gain: Scale applied to the line before the passes (derived from the poles if None)

    Example:
        >>> f = RecursiveFilter.spline(3)
        >>> round(f.poles[0], 6)
        -0.267949
        >>> round(f.gain, 6)
        6.0
    """

    poles: tuple
    gain: float | complex | None = field(default=None)

    def __post_init__(self):
        """Validate pole stability and derive the gain."""
        poles = np.atleast_1d(np.asarray(self.poles))
        if poles.ndim != 1:
            raise InvalidKernel(f"poles must be a scalar or 1-D sequence, got shape {poles.shape}")
        if poles.size == 0:
            raise InvalidKernel("A recursive filter needs at least one pole")
        if not np.issubdtype(poles.dtype, np.number):
            raise InvalidKernel(f"poles must be numeric, got dtype {poles.dtype}")

        for pole in poles.tolist():
            if not np.isfinite(pole) or abs(pole) >= 1.0:
                raise UnstableFilter(
                    f"pole {pole} has magnitude {abs(pole):.6g}; recursive filters "
                    f"need every |pole| < 1"
                )

        poles = tuple(poles.tolist())
        object.__setattr__(self, "poles", poles)
        if self.gain is None:
            object.__setattr__(self, "gain", _default_gain(poles))

    @classmethod
    def spline(cls, order: int) -> RecursiveFilter:
        """
        B-spline pre-filter of the given order (2 to 5).

        Raises:
            ValueError: If the order has no pre-filter poles
        """
        if order not in SPLINE_POLES:
            raise ValueError(f"Spline pre-filter order must be between 2 and 5, got {order}")
        return cls(SPLINE_POLES[order])

    @property
    def is_complex(self) -> bool:
        return any(isinstance(p, complex) for p in self.poles) or isinstance(self.gain, complex)

    @property
    def active_poles(self) -> tuple:
        """Non-zero poles; a zero pole is the identity."""
        return tuple(p for p in self.poles if p != 0)

    @property
    def horizons(self) -> tuple[int, ...]:
        """Decay horizon of every active pole."""
        return tuple(pole_horizon(p) for p in self.active_poles)

    def validate(self, extent: int, mode: BoundaryMode) -> None:
        # Lines of length 1 are returned unchanged, so mirror does not need 2 samples here.
        if extent <= 0:
            raise InvalidExtent(f"extent must be positive, got {extent}")


def gaussian_weights(sigma: float, truncate: float = 4.0) -> tuple[float, ...]:
    """
    Normalized 1-D Gaussian kernel truncated at ``truncate`` standard deviations.

    Example:
        >>> len(gaussian_weights(1.0, 4.0))
        9
    """
    if sigma == 0:
        return (1.0,)
    radius = int(truncate * sigma + 0.5)
    x = np.arange(-radius, radius + 1, dtype=np.float64)
    phi = np.exp(-0.5 / (sigma * sigma) * x * x)
    phi /= phi.sum()
    return tuple(phi.tolist())


def uniform_weights(size: int) -> tuple[float, ...]:
    """Box kernel of ``size`` equal weights summing to one."""
    if isinstance(size, bool) or int(size) != size:
        raise InvalidKernel(f"size must be an integer, got {size!r}")
    size = int(size)
    if size < 1:
        raise InvalidKernel(f"Incorrect filter size ({size})")
    return (1.0 / size,) * size
