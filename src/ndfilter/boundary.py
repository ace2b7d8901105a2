"""
Boundary resolution for out-of-range array accesses.

Maps an integer position along one axis to an in-range source index (or to
the constant-fill sentinel) according to a boundary mode. The same rules
drive the filters and the explicit ``pad`` utility, so a padded array and a
filter's implicit edge extension agree element for element.

Mode semantics for ``[1, 2, 3]``:

- constant: ``c c | 1 2 3 | c c``
- nearest:  ``1 1 | 1 2 3 | 3 3``
- mirror:   ``3 2 | 1 2 3 | 2 1``  (period 2n - 2, edge sample not repeated)
- reflect:  ``2 1 | 1 2 3 | 3 2``  (period 2n, edge sample repeated)
- wrap:     ``2 3 | 1 2 3 | 1 2``  (period n)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum

import numpy as np

from ndfilter.constants import DEFAULT_CVAL, FILL_INDEX, MIN_EXTENT
from ndfilter.errors import InvalidExtent, ShapeMismatch

logger = logging.getLogger(__name__)


class BoundaryMode(StrEnum):
    """How an array is extended beyond its edges."""

    CONSTANT = "constant"
    NEAREST = "nearest"
    MIRROR = "mirror"
    REFLECT = "reflect"
    WRAP = "wrap"

    @classmethod
    def parse(cls, value: str | BoundaryMode) -> BoundaryMode:
        """
        Convert a mode name (case-insensitive) or member to a BoundaryMode.

        Raises:
            ValueError: If the name is not a known mode
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"mode must be str or BoundaryMode, got {type(value).__name__}")
        try:
            return cls(value.lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"mode='{value}' is not valid. Valid options are: {choices}") from None

    @property
    def min_extent(self) -> int:
        """Smallest axis length this mode can resolve against."""
        return MIN_EXTENT[self.value]


MODE_NAMES = frozenset(m.value for m in BoundaryMode)


def minimum_extent(mode: str | BoundaryMode) -> int:
    """Smallest axis length ``mode`` can resolve against."""
    return BoundaryMode.parse(mode).min_extent


def check_extent(extent: int, mode: BoundaryMode) -> None:
    """Raise InvalidExtent if ``extent`` cannot be resolved under ``mode``."""
    if extent <= 0:
        raise InvalidExtent(f"extent must be positive, got {extent}")
    if extent < mode.min_extent:
        raise InvalidExtent(
            f"mode '{mode.value}' needs an extent of at least {mode.min_extent}, got {extent}"
        )


def resolve(index: int, extent: int, mode: str | BoundaryMode) -> int:
    """
    Resolve one position along an axis of length ``extent``.

    Args:
        index: Position, possibly far outside [0, extent)
        extent: Axis length
        mode: Boundary mode

    Returns:
        An index in [0, extent), or FILL_INDEX when the constant fill value applies

    Raises:
        InvalidExtent: If extent <= 0, or extent < 2 in mirror mode

    Example:
        >>> resolve(-1, 4, "reflect")
        0
        >>> resolve(-1, 4, "mirror")
        1
        >>> resolve(5, 4, "wrap")
        1
    """
    mode = BoundaryMode.parse(mode)
    check_extent(extent, mode)
    index = int(index)

    if 0 <= index < extent:
        return index

    if mode is BoundaryMode.CONSTANT:
        return FILL_INDEX
    if mode is BoundaryMode.NEAREST:
        return 0 if index < 0 else extent - 1
    if mode is BoundaryMode.WRAP:
        return index % extent
    if mode is BoundaryMode.REFLECT:
        period = 2 * extent
        m = index % period
        return m if m < extent else period - 1 - m
    # mirror
    period = 2 * extent - 2
    m = index % period
    return m if m < extent else period - m


def resolve_indices(
    indices: np.ndarray | Sequence[int], extent: int, mode: str | BoundaryMode
) -> np.ndarray:
    """
    Vectorized ``resolve`` over an integer array.

    Returns:
        int64 array of the same shape holding in-range indices or FILL_INDEX
    """
    mode = BoundaryMode.parse(mode)
    check_extent(extent, mode)
    idx = np.asarray(indices, dtype=np.int64)
    inside = (idx >= 0) & (idx < extent)

    if mode is BoundaryMode.CONSTANT:
        out = np.where(inside, idx, FILL_INDEX)
    elif mode is BoundaryMode.NEAREST:
        out = np.clip(idx, 0, extent - 1)
    elif mode is BoundaryMode.WRAP:
        out = np.mod(idx, extent)
    elif mode is BoundaryMode.REFLECT:
        period = 2 * extent
        m = np.mod(idx, period)
        out = np.where(m < extent, m, period - 1 - m)
    else:
        period = 2 * extent - 2
        m = np.mod(idx, period)
        out = np.where(m < extent, m, period - m)

    return out.astype(np.int64, copy=False)


def padded_index_map(extent: int, before: int, after: int, mode: str | BoundaryMode) -> np.ndarray:
    """Resolved source index for every position of a line padded by (before, after)."""
    return resolve_indices(np.arange(-before, extent + after), extent, mode)


def _normalize_pad_width(pad_width, ndim: int) -> list[tuple[int, int]]:
    if np.isscalar(pad_width):
        pairs = [(int(pad_width), int(pad_width))] * ndim
    else:
        pad_width = list(pad_width)
        if len(pad_width) != ndim:
            raise ShapeMismatch(
                f"pad_width has {len(pad_width)} entries but the array has {ndim} axes"
            )
        pairs = []
        for entry in pad_width:
            if np.isscalar(entry):
                pairs.append((int(entry), int(entry)))
            else:
                before, after = entry
                pairs.append((int(before), int(after)))

    for before, after in pairs:
        if before < 0 or after < 0:
            raise ValueError(f"pad widths must be non-negative, got {pairs}")
    return pairs


def pad(
    data: np.ndarray,
    pad_width,
    mode: str | BoundaryMode = "reflect",
    cval: float = DEFAULT_CVAL,
) -> np.ndarray:
    """
    Pad an array using the filters' boundary rules.

    Args:
        data: Input N-D array
        pad_width: int, or one int / (before, after) pair per axis
        mode: Boundary mode
        cval: Fill value for constant mode

    Returns:
        Padded array of the same dtype

    Example:
        >>> pad(np.array([1, 2, 3]), 2, "mirror")
        array([3, 2, 1, 2, 3, 2, 1])
    """
    mode = BoundaryMode.parse(mode)
    data = np.asarray(data)
    if data.ndim == 0:
        return data.copy()
    pairs = _normalize_pad_width(pad_width, data.ndim)

    index_maps = []
    for extent, (before, after) in zip(data.shape, pairs):
        index_maps.append(padded_index_map(extent, before, after, mode))

    # Gather with the fill sentinel redirected to a valid index, then mask.
    grids = np.ix_(*[np.where(m == FILL_INDEX, 0, m) for m in index_maps])
    padded = data[grids]

    if mode is BoundaryMode.CONSTANT:
        fill = np.zeros(padded.shape, dtype=bool)
        for axis, m in enumerate(index_maps):
            shape = [1] * data.ndim
            shape[axis] = m.size
            fill |= (m == FILL_INDEX).reshape(shape)
        padded[fill] = cval

    logger.debug("[pad] %s -> %s (mode=%s)", data.shape, padded.shape, mode.value)
    return padded
