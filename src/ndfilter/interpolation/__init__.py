"""
B-spline pre-filtering for interpolation.

Example:
    >>> from ndfilter.interpolation import spline_filter
    >>> coeffs = spline_filter(image, order=3, mode="mirror")
"""

from ndfilter.interpolation.api import spline_filter, spline_filter1d

__all__ = ["spline_filter", "spline_filter1d"]
