"""
Error types raised by ndfilter.

Every error is raised by upfront validation, before any output array is
allocated or any numeric pass runs. All of them derive from ``ValueError``
so callers that already guard filter calls with ``except ValueError`` keep
working.
"""

from __future__ import annotations


class FilterError(ValueError):
    """Base class for invalid filter configurations."""


class InvalidExtent(FilterError):
    """An axis is empty, or too short for the selected boundary mode."""


class InvalidKernel(FilterError):
    """A kernel is empty, or its origin does not let it cover the output sample."""


class UnstableFilter(FilterError):
    """A recursive filter pole lies on or outside the unit circle."""


class ShapeMismatch(FilterError):
    """Per-axis specifications do not match the array rank, or an axis is out of range."""
