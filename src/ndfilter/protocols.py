"""
Protocol definitions for per-axis operators.

Defines the common interface every operator accepted by the separable
composer must implement.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ndfilter.boundary import BoundaryMode


@runtime_checkable
class AxisOperator(Protocol):
    """
    Protocol for a 1-D operator applied along one axis (Kernel, RecursiveFilter, RankWindow).

    Operators are immutable; everything that can be checked without the
    data is checked at construction, the rest in ``validate``.
    """

    def validate(self, extent: int, mode: BoundaryMode) -> None:
        """
        Check that the operator can run on lines of length ``extent``.

        Args:
            extent: Length of the filtered axis
            mode: Boundary mode of the call

        Raises:
            InvalidExtent: If the axis is too short for the mode
        """
        ...
