"""
B-spline pre-filter.

Spline interpolation of order > 1 does not run on the samples directly but
on B-spline coefficients: the values that, convolved with the sampled
B-spline kernel, reproduce the samples. Recovering them means inverting
that convolution, which factors into one symmetric recursive filter per
pole of the spline order.
"""

import logging

import numpy as np

from ndfilter.boundary import MODE_NAMES
from ndfilter.config import FilterConfig
from ndfilter.constants import (
    DEFAULT_SPLINE_MODE,
    DEFAULT_SPLINE_ORDER,
    SPLINE_ORDER_MAX,
    SPLINE_ORDER_MIN,
)
from ndfilter.pipeline import recursive_filter_along_axis, separable_filter
from ndfilter.specs import RecursiveFilter
from ndfilter.validators import validate_choices, validate_range

logger = logging.getLogger(__name__)


def _check_order(order) -> int:
    if int(order) != order:
        raise ValueError(f"order must be an integer, got {order!r}")
    return int(order)


def _coefficient_array(data) -> np.ndarray:
    # Coefficients are always computed in double precision
    data = np.asarray(data)
    return data.astype(np.complex128 if np.iscomplexobj(data) else np.float64)


@validate_choices(MODE_NAMES, "mode", 3)
@validate_range(SPLINE_ORDER_MIN, SPLINE_ORDER_MAX, "order", 1)
def spline_filter1d(
    data: np.ndarray,
    order: int = DEFAULT_SPLINE_ORDER,
    axis: int = -1,
    mode: str = DEFAULT_SPLINE_MODE,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    Compute 1-D B-spline coefficients along ``axis``.

    Orders 0 and 1 need no pre-filtering and return a double precision copy.

    Args:
        data: Input N-D array
        order: Spline order (0 to 5)
        axis: Axis to filter
        mode: Boundary mode of the interpolation the coefficients are for
        num_threads: Worker threads (None = Numba default)
        config: Optional FilterConfig (overrides mode and num_threads)

    Returns:
        float64 (or complex128) coefficient array with the input's shape

    Example:
        >>> spline_filter1d(np.array([0.1, 0.5, 0.5]))
        array([-0.2,  0.7,  0.4])
    """
    order = _check_order(order)
    data = _coefficient_array(data)
    if order < 2:
        return data

    return recursive_filter_along_axis(
        data, axis, RecursiveFilter.spline(order), mode, num_threads=num_threads, config=config
    )


@validate_choices(MODE_NAMES, "mode", 2)
@validate_range(SPLINE_ORDER_MIN, SPLINE_ORDER_MAX, "order", 1)
def spline_filter(
    data: np.ndarray,
    order: int = DEFAULT_SPLINE_ORDER,
    mode: str = DEFAULT_SPLINE_MODE,
    *,
    num_threads: int | None = None,
    config: FilterConfig | None = None,
) -> np.ndarray:
    """
    Compute N-D B-spline coefficients (one 1-D pre-filter per axis).

    Args:
        data: Input N-D array
        order: Spline order (0 to 5)
        mode: Boundary mode
        num_threads: Worker threads (None = Numba default)
        config: Optional FilterConfig (overrides mode and num_threads)

    Returns:
        float64 (or complex128) coefficient array with the input's shape
    """
    order = _check_order(order)
    data = _coefficient_array(data)
    if order < 2 or data.ndim == 0:
        return data

    prefilter = RecursiveFilter.spline(order)
    logger.debug("[spline_filter] order=%d on shape %s", order, data.shape)
    return separable_filter(
        data, [prefilter] * data.ndim, mode, num_threads=num_threads, config=config
    )
