"""
Multidimensional filter family.

Function-based interface over the separable composer: every function takes
the data first, then its filter parameters, then ``mode``/``cval`` and an
optional ``FilterConfig`` that overrides the keyword options.

Separable filters (Gaussian, uniform, min/max, Sobel, Prewitt) run one 1-D
pass per axis. ``correlate``/``convolve`` take a full N-D kernel and are
computed directly on a padded copy; they are the non-separable reference.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from ndfilter.boundary import MODE_NAMES, BoundaryMode, check_extent, pad
from ndfilter.config import FilterConfig
from ndfilter.constants import (
    DEFAULT_CVAL,
    DEFAULT_MODE,
    DEFAULT_TRUNCATE,
    DEFAULT_UNIFORM_SIZE,
    DERIVATIVE_WEIGHTS,
    PREWITT_SMOOTHING,
    SOBEL_SMOOTHING,
)
from ndfilter.errors import InvalidKernel, ShapeMismatch
from ndfilter.pipeline import (
    filter_along_axis,
    separable_filter,
    working_dtype,
)
from ndfilter.specs import Kernel, RankWindow, check_origin, gaussian_weights, uniform_weights
from ndfilter.validators import validate_choices, validate_positive, validate_range
from ndfilter.walker import normalize_axis

logger = logging.getLogger(__name__)


def _per_axis(value, ndim: int, name: str) -> list:
    """Broadcast a scalar to one value per axis, or check a sequence's length."""
    if np.isscalar(value):
        return [value] * ndim
    values = list(value)
    if len(values) != ndim:
        raise ShapeMismatch(f"{name} has {len(values)} entries but the array has {ndim} axes")
    return values


# ============================================================================
# Correlation and Convolution
# ============================================================================


@validate_choices(MODE_NAMES, "mode", 3)
def correlate1d(
    data: np.ndarray,
    weights,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin: int = 0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    1-D correlation along ``axis``.

    Example:
        >>> correlate1d(np.array([2, 8, 0, 4, 1, 9, 9, 0]), [1, 3])
        array([ 8., 26.,  8., 12.,  7., 28., 36.,  9.])
    """
    return filter_along_axis(
        data, axis, weights, origin, mode, cval, num_threads=num_threads, config=config
    )


@validate_choices(MODE_NAMES, "mode", 3)
def convolve1d(
    data: np.ndarray,
    weights,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin: int = 0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    1-D convolution along ``axis``.

    Example:
        >>> convolve1d(np.array([2, 8, 0, 4, 1, 9, 9, 0]), [1, 3])
        array([14., 24.,  4., 13., 12., 36., 27.,  0.])
    """
    return filter_along_axis(
        data,
        axis,
        weights,
        origin,
        mode,
        cval,
        convolve=True,
        num_threads=num_threads,
        config=config,
    )


def _correlate_full(data, weights, mode, cval, origin, config, convolve: bool) -> np.ndarray:
    if config is not None:
        mode, cval = config.boundary_mode, config.cval
    mode = BoundaryMode.parse(mode)
    data = np.asarray(data)
    weights = np.asarray(weights)

    if weights.ndim != data.ndim:
        raise ShapeMismatch(
            f"weights have rank {weights.ndim} but the array has rank {data.ndim}"
        )
    if weights.size == 0:
        raise InvalidKernel("No filter weights given")
    if not np.issubdtype(weights.dtype, np.number):
        raise InvalidKernel(f"weights must be numeric, got dtype {weights.dtype}")

    origins = [int(o) for o in _per_axis(origin, data.ndim, "origin")]
    if convolve:
        weights = weights[(slice(None, None, -1),) * weights.ndim]
        origins = [-o - (1 if s % 2 == 0 else 0) for o, s in zip(origins, weights.shape)]
    for size, o in zip(weights.shape, origins):
        check_origin(size, o)
    for extent in data.shape:
        check_extent(extent, mode)

    dtype = working_dtype(data, np.iscomplexobj(weights) or np.iscomplexobj(cval))
    pad_width = [(s // 2 + o, s - 1 - (s // 2 + o)) for s, o in zip(weights.shape, origins)]
    padded = pad(data.astype(dtype, copy=False), pad_width, mode, cval)

    # result[i] = sum_j weights[j] * padded[i + j], one shifted slice per tap
    weights = weights.astype(dtype)
    result = np.zeros(data.shape, dtype=dtype)
    for idx in np.ndindex(weights.shape):
        window = tuple(slice(i, i + n) for i, n in zip(idx, data.shape))
        result += weights[idx] * padded[window]
    return result


@validate_choices(MODE_NAMES, "mode", 2)
def correlate(
    data: np.ndarray,
    weights,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin: int | tuple[int, ...] = 0,
    *,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    N-D correlation with a full (not necessarily separable) kernel.

    Args:
        data: Input N-D array
        weights: Kernel with the same rank as ``data``
        mode: Boundary mode
        cval: Fill value for "constant" mode
        origin: Anchor offset, scalar or one per axis
        config: Optional FilterConfig (overrides mode and cval)

    Returns:
        Correlated array with the input's shape

    Raises:
        ShapeMismatch: If the kernel rank differs from the array rank
        InvalidKernel: If the kernel is empty or an origin is out of range
    """
    return _correlate_full(data, weights, mode, cval, origin, config, convolve=False)


@validate_choices(MODE_NAMES, "mode", 2)
def convolve(
    data: np.ndarray,
    weights,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin: int | tuple[int, ...] = 0,
    *,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """N-D convolution with a full kernel (see ``correlate``)."""
    return _correlate_full(data, weights, mode, cval, origin, config, convolve=True)


# ============================================================================
# Smoothing
# ============================================================================


@validate_range(0.0, math.inf, "sigma", 1)
def gaussian_filter1d(
    data: np.ndarray,
    sigma: float,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    truncate: float = DEFAULT_TRUNCATE,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    1-D Gaussian smoothing along ``axis``.

    The kernel is truncated at ``truncate`` standard deviations and
    normalized to sum to one. ``sigma=0`` leaves the data unchanged.
    """
    if config is not None:
        truncate = config.truncate
    kernel = Kernel(gaussian_weights(sigma, truncate))
    return filter_along_axis(
        data, axis, kernel, mode=mode, cval=cval, num_threads=num_threads, config=config
    )


def gaussian_filter(
    data: np.ndarray,
    sigma,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    truncate: float = DEFAULT_TRUNCATE,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    N-D Gaussian smoothing as a sequence of 1-D passes.

    Args:
        data: Input N-D array
        sigma: Standard deviation, scalar or one per axis (0 skips an axis)
        mode: Boundary mode
        cval: Fill value for "constant" mode
        truncate: Kernel radius in standard deviations
        num_threads: Worker threads (None = Numba default)
        config: Optional FilterConfig (overrides mode, cval, truncate and num_threads)

    Returns:
        Smoothed array with the input's shape

    Example:
        >>> smoothed = gaussian_filter(image, sigma=(2.0, 0.0))  # rows untouched
    """
    data = np.asarray(data)
    if config is not None:
        truncate = config.truncate
    sigmas = _per_axis(sigma, data.ndim, "sigma")
    specs = []
    for s in sigmas:
        if s < 0:
            raise ValueError(f"sigma={s} must be non-negative")
        specs.append(Kernel(gaussian_weights(s, truncate)) if s > 0 else None)

    logger.debug("[gaussian_filter] sigma=%s truncate=%s", sigmas, truncate)
    return separable_filter(data, specs, mode, cval, num_threads=num_threads, config=config)


@validate_positive("size", 1)
def uniform_filter1d(
    data: np.ndarray,
    size: int,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin: int = 0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """1-D moving average over ``size`` samples along ``axis``."""
    kernel = Kernel(uniform_weights(size), origin)
    return filter_along_axis(
        data, axis, kernel, mode=mode, cval=cval, num_threads=num_threads, config=config
    )


def uniform_filter(
    data: np.ndarray,
    size=DEFAULT_UNIFORM_SIZE,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin=0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    N-D moving average; ``size`` and ``origin`` are scalars or one per axis.

    Axes with ``size=1`` are skipped.
    """
    data = np.asarray(data)
    sizes = _per_axis(size, data.ndim, "size")
    origins = _per_axis(origin, data.ndim, "origin")
    specs = [
        Kernel(uniform_weights(s), o) if s != 1 or o != 0 else None
        for s, o in zip(sizes, origins)
    ]
    return separable_filter(data, specs, mode, cval, num_threads=num_threads, config=config)


# ============================================================================
# Rank Filters
# ============================================================================


def _extremum1d(data, size, axis, mode, cval, origin, maximum, num_threads, config):
    window = RankWindow(size, origin, maximum=maximum)
    return filter_along_axis(
        data, axis, window, mode=mode, cval=cval, num_threads=num_threads, config=config
    )


def _extremum(data, size, mode, cval, origin, maximum, num_threads, config):
    data = np.asarray(data)
    sizes = _per_axis(size, data.ndim, "size")
    origins = _per_axis(origin, data.ndim, "origin")
    specs = [
        RankWindow(s, o, maximum=maximum) if s != 1 or o != 0 else None
        for s, o in zip(sizes, origins)
    ]
    return separable_filter(data, specs, mode, cval, num_threads=num_threads, config=config)


@validate_positive("size", 1)
def minimum_filter1d(
    data: np.ndarray,
    size: int,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin: int = 0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    Running minimum over ``size`` samples along ``axis``.

    Example:
        >>> minimum_filter1d(np.array([2, 8, 0, 4, 1, 9, 9, 0]), 3)
        array([2., 0., 0., 0., 1., 1., 0., 0.])
    """
    return _extremum1d(data, size, axis, mode, cval, origin, False, num_threads, config)


@validate_positive("size", 1)
def maximum_filter1d(
    data: np.ndarray,
    size: int,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin: int = 0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    Running maximum over ``size`` samples along ``axis``.

    Example:
        >>> maximum_filter1d(np.array([2, 8, 0, 4, 1, 9, 9, 0]), 3)
        array([8., 8., 8., 4., 9., 9., 9., 9.])
    """
    return _extremum1d(data, size, axis, mode, cval, origin, True, num_threads, config)


def minimum_filter(
    data: np.ndarray,
    size,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin=0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """N-D running minimum over a rectangular window (separable)."""
    return _extremum(data, size, mode, cval, origin, False, num_threads, config)


def maximum_filter(
    data: np.ndarray,
    size,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    origin=0,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """N-D running maximum over a rectangular window (separable)."""
    return _extremum(data, size, mode, cval, origin, True, num_threads, config)


# ============================================================================
# Derivative Filters
# ============================================================================


def _derivative(data, axis, smoothing, mode, cval, num_threads, config):
    data = np.asarray(data)
    axis = normalize_axis(axis, data.ndim)
    specs = [Kernel(smoothing)] * data.ndim
    specs[axis] = Kernel(DERIVATIVE_WEIGHTS)
    return separable_filter(data, specs, mode, cval, num_threads=num_threads, config=config)


@validate_choices(MODE_NAMES, "mode", 2)
def sobel(
    data: np.ndarray,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    Sobel derivative along ``axis``.

    Correlates with [-1, 0, 1] along ``axis`` and smooths with [1, 2, 1]
    along every other axis.
    """
    return _derivative(data, axis, SOBEL_SMOOTHING, mode, cval, num_threads, config)


@validate_choices(MODE_NAMES, "mode", 2)
def prewitt(
    data: np.ndarray,
    axis: int = -1,
    mode: str = DEFAULT_MODE,
    cval: float = DEFAULT_CVAL,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """Prewitt derivative along ``axis`` ([1, 1, 1] smoothing on the other axes)."""
    return _derivative(data, axis, PREWITT_SMOOTHING, mode, cval, num_threads, config)
