"""
Axis walking for N-D arrays.

A *line* is the 1-D sequence obtained by varying one axis while every other
axis is held fixed. The helpers here expose those lines without special
casing the array rank:

- ``line_view`` reshapes a C-contiguous array to ``(outer, extent, inner)``
  so a Numba kernel can address line ``(o, q)`` as ``arr[o, :, q]``. This is
  a zero-copy view; the filtered axis does not have to be the contiguous one.
- ``line_positions`` lists the input positions the windows of a line read;
  ``window_index_map`` resolves them under a boundary mode.
"""

from __future__ import annotations

import math

import numpy as np

from ndfilter.boundary import BoundaryMode, resolve_indices
from ndfilter.errors import ShapeMismatch


def normalize_axis(axis: int, ndim: int) -> int:
    """
    Normalize a possibly negative axis index.

    Raises:
        ShapeMismatch: If axis is outside [-ndim, ndim)
    """
    axis = int(axis)
    if not -ndim <= axis < ndim:
        raise ShapeMismatch(f"axis {axis} is out of bounds for an array of rank {ndim}")
    return axis % ndim


def line_count(shape: tuple[int, ...], axis: int) -> int:
    """Number of lines along ``axis``."""
    axis = normalize_axis(axis, len(shape))
    return math.prod(shape[:axis]) * math.prod(shape[axis + 1 :])


def line_shape(shape: tuple[int, ...], axis: int) -> tuple[int, int, int]:
    """The ``(outer, extent, inner)`` shape used by ``line_view``."""
    axis = normalize_axis(axis, len(shape))
    return (math.prod(shape[:axis]), shape[axis], math.prod(shape[axis + 1 :]))


def line_view(arr: np.ndarray, axis: int) -> np.ndarray:
    """
    View a C-contiguous array as ``(outer, extent, inner)`` lines along ``axis``.

    Args:
        arr: C-contiguous array
        axis: Axis to walk

    Returns:
        3-D view sharing memory with ``arr``
    """
    if not arr.flags.c_contiguous:
        raise ValueError("line_view needs a C-contiguous array")
    return arr.reshape(line_shape(arr.shape, axis))


def line_positions(extent: int, size: int, origin: int = 0) -> np.ndarray:
    """
    Raw input positions read by the windows along one line.

    A window of ``size`` samples anchored ``size // 2 + origin`` samples
    after its first sample reads, for output ``i``, the positions
    ``span[i : i + size]`` of the returned span. Positions are not
    boundary-resolved.

    Returns:
        int64 array of length ``extent + size - 1``

    Example:
        >>> line_positions(3, 3)
        array([-1,  0,  1,  2,  3])
    """
    left = size // 2 + origin
    return np.arange(-left, extent + size - 1 - left, dtype=np.int64)


def window_index_map(extent: int, size: int, origin: int, mode: str | BoundaryMode) -> np.ndarray:
    """Boundary-resolved ``line_positions`` (FILL_INDEX where the fill value applies)."""
    return resolve_indices(line_positions(extent, size, origin), extent, mode)
