"""
Multidimensional filter family.

Features:
- Correlation and convolution (1-D along an axis, or with a full N-D kernel)
- Gaussian and uniform smoothing
- Running minimum / maximum
- Sobel and Prewitt derivatives

Example:
    >>> from ndfilter.filters import gaussian_filter, sobel
    >>> smoothed = gaussian_filter(image, sigma=1.5, mode="nearest")
    >>> edges = sobel(smoothed, axis=0)
"""

from ndfilter.filters.api import (
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

__all__ = [
    # Linear
    "correlate1d",
    "convolve1d",
    "correlate",
    "convolve",
    # Smoothing
    "gaussian_filter1d",
    "gaussian_filter",
    "uniform_filter1d",
    "uniform_filter",
    # Rank
    "minimum_filter1d",
    "maximum_filter1d",
    "minimum_filter",
    "maximum_filter",
    # Derivatives
    "sobel",
    "prewitt",
]
