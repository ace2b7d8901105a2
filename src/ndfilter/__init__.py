"""
ndfilter - Multidimensional Array Filtering

Separable linear, rank and recursive filters for N-D NumPy arrays, with
scipy.ndimage-compatible boundary handling. Every 1-D pass runs as a
parallel Numba kernel over the lines of one axis.

Features:
- Boundary modes: constant, nearest, mirror, reflect, wrap
- Correlation / convolution along an axis or with a full N-D kernel
- Gaussian, uniform, minimum and maximum filters
- Sobel and Prewitt derivatives
- Recursive (IIR) filters with exact boundary initialization
- B-spline pre-filtering (orders 0 to 5)
- SeparableFilter: fluent per-axis composition

Example - Functional API:
    >>> import numpy as np
    >>> from ndfilter import gaussian_filter, spline_filter
    >>>
    >>> image = np.random.rand(512, 512)
    >>> smoothed = gaussian_filter(image, sigma=2.0, mode="nearest")
    >>> coeffs = spline_filter(image, order=3)

Example - Composer:
    >>> from ndfilter import SeparableFilter
    >>>
    >>> pipeline = (
    ...     SeparableFilter(mode="mirror")
    ...     .gaussian(0, sigma=1.5)
    ...     .maximum(1, size=5)
    ... )
    >>> result = pipeline(image)
"""

__version__ = "0.1.0"

# Boundary handling
from ndfilter.boundary import BoundaryMode, minimum_extent, pad, resolve, resolve_indices

# Configuration and errors
from ndfilter.config import FilterConfig
from ndfilter.errors import (
    FilterError,
    InvalidExtent,
    InvalidKernel,
    ShapeMismatch,
    UnstableFilter,
)

# Filter family
from ndfilter.filters import (
    convolve,
    convolve1d,
    correlate,
    correlate1d,
    gaussian_filter,
    gaussian_filter1d,
    maximum_filter,
    maximum_filter1d,
    minimum_filter,
    minimum_filter1d,
    prewitt,
    sobel,
    uniform_filter,
    uniform_filter1d,
)
from ndfilter.interpolation import spline_filter, spline_filter1d

# Composer
from ndfilter.pipeline import (
    SeparableFilter,
    filter_along_axis,
    recursive_filter_along_axis,
    separable_filter,
)
from ndfilter.protocols import AxisOperator
from ndfilter.specs import Kernel, RankWindow, RecursiveFilter
from ndfilter.walker import (
    line_count,
    line_positions,
    line_view,
    normalize_axis,
    window_index_map,
)

__all__ = [
    # Core
    "separable_filter",
    "filter_along_axis",
    "recursive_filter_along_axis",
    "SeparableFilter",
    # Operators
    "AxisOperator",
    "Kernel",
    "RankWindow",
    "RecursiveFilter",
    # Boundary handling
    "BoundaryMode",
    "resolve",
    "resolve_indices",
    "minimum_extent",
    "pad",
    # Axis walking
    "normalize_axis",
    "line_count",
    "line_view",
    "line_positions",
    "window_index_map",
    # Filters
    "correlate1d",
    "convolve1d",
    "correlate",
    "convolve",
    "gaussian_filter1d",
    "gaussian_filter",
    "uniform_filter1d",
    "uniform_filter",
    "minimum_filter1d",
    "maximum_filter1d",
    "minimum_filter",
    "maximum_filter",
    "sobel",
    "prewitt",
    "spline_filter1d",
    "spline_filter",
    # Configuration
    "FilterConfig",
    # Errors
    "FilterError",
    "InvalidExtent",
    "InvalidKernel",
    "UnstableFilter",
    "ShapeMismatch",
]
