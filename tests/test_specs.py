"""
Tests for per-axis operator specifications.
"""

import math

import numpy as np
import pytest

from ndfilter import (
    BoundaryMode,
    InvalidExtent,
    InvalidKernel,
    Kernel,
    RankWindow,
    RecursiveFilter,
    UnstableFilter,
)
from ndfilter.constants import (
    SPLINE_POLES,
    SYMMETRY_ANTISYMMETRIC,
    SYMMETRY_NONE,
    SYMMETRY_SYMMETRIC,
)
from ndfilter.protocols import AxisOperator
from ndfilter.specs import gaussian_weights, pole_horizon, uniform_weights

# ============================================================================
# Kernel Tests
# ============================================================================


class TestKernel:
    """Test finite kernels."""

    def test_weights_stored_as_tuple(self):
        """Test that weights are copied into an immutable tuple."""
        weights = np.array([1.0, 2.0, 1.0])
        kernel = Kernel(weights)
        weights[0] = 99.0
        assert kernel.weights == (1.0, 2.0, 1.0)

    def test_left_right(self):
        """Test reach before and after the output sample."""
        assert (Kernel((1, 2, 3)).left, Kernel((1, 2, 3)).right) == (1, 1)
        assert (Kernel((1, 2)).left, Kernel((1, 2)).right) == (1, 0)
        assert (Kernel((1, 2, 3), origin=1).left, Kernel((1, 2, 3), origin=1).right) == (2, 0)

    def test_empty(self):
        """Test that empty weights are rejected."""
        with pytest.raises(InvalidKernel, match="No filter weights"):
            Kernel(())

    def test_non_finite(self):
        """Test that NaN weights are rejected."""
        with pytest.raises(InvalidKernel, match="finite"):
            Kernel((1.0, float("nan")))

    def test_two_dimensional(self):
        """Test that 2-D weights are rejected."""
        with pytest.raises(InvalidKernel, match="1-D"):
            Kernel(np.ones((2, 2)))

    @pytest.mark.parametrize("size,origin", [(3, 2), (3, -2), (4, 2), (4, -3), (1, 1)])
    def test_origin_out_of_range(self, size, origin):
        """Test that the anchor must stay inside the kernel."""
        with pytest.raises(InvalidKernel, match="origin"):
            Kernel((1.0,) * size, origin)

    @pytest.mark.parametrize("size,origin", [(3, 1), (3, -1), (4, 1), (4, -2)])
    def test_origin_in_range(self, size, origin):
        """Test the extreme valid origins."""
        assert Kernel((1.0,) * size, origin).origin == origin

    def test_convolution_reverses(self):
        """Test the correlation kernel equivalent to a convolution."""
        kernel = Kernel.convolution((1, 3))
        assert kernel.weights == (3, 1)
        assert kernel.origin == -1

        kernel = Kernel.convolution((1, 2, 3), origin=1)
        assert kernel.weights == (3, 2, 1)
        assert kernel.origin == -1

    def test_symmetry(self):
        """Test symmetry classification."""
        assert Kernel((1, 2, 1)).symmetry == SYMMETRY_SYMMETRIC
        assert Kernel((-1, 0, 1)).symmetry == SYMMETRY_ANTISYMMETRIC
        assert Kernel((1, 2, 3)).symmetry == SYMMETRY_NONE
        assert Kernel((1, 1)).symmetry == SYMMETRY_NONE
        assert Kernel((5,)).symmetry == SYMMETRY_NONE

    def test_validate_extent(self):
        """Test extent validation against the mode."""
        kernel = Kernel((1, 2, 1))
        kernel.validate(1, BoundaryMode.REFLECT)
        with pytest.raises(InvalidExtent):
            kernel.validate(1, BoundaryMode.MIRROR)
        with pytest.raises(InvalidExtent):
            kernel.validate(0, BoundaryMode.REFLECT)

    def test_is_axis_operator(self):
        """Test protocol conformance."""
        assert isinstance(Kernel((1,)), AxisOperator)
        assert isinstance(RankWindow(3), AxisOperator)
        assert isinstance(RecursiveFilter(0.5), AxisOperator)

    def test_frozen(self):
        """Test that kernels are immutable."""
        kernel = Kernel((1, 2))
        with pytest.raises(AttributeError):
            kernel.origin = 1


# ============================================================================
# RankWindow Tests
# ============================================================================


class TestRankWindow:
    """Test running min/max windows."""

    def test_size_must_be_positive(self):
        """Test that zero-length windows are rejected."""
        with pytest.raises(InvalidKernel, match="size"):
            RankWindow(0)

    def test_size_must_be_integer(self):
        """Test that fractional sizes are rejected."""
        with pytest.raises(InvalidKernel, match="integer"):
            RankWindow(2.5)

    def test_reach(self):
        """Test that windows cover the same positions as kernels."""
        window = RankWindow(4, origin=-1)
        kernel = Kernel((1.0,) * 4, origin=-1)
        assert (window.left, window.right) == (kernel.left, kernel.right)


# ============================================================================
# RecursiveFilter Tests
# ============================================================================


class TestRecursiveFilter:
    """Test recursive filter specifications."""

    @pytest.mark.parametrize("pole", [1.0, -1.0, 1.5, 0.8 + 0.8j, float("inf")])
    def test_unstable_poles(self, pole):
        """Test that poles on or outside the unit circle are rejected."""
        with pytest.raises(UnstableFilter):
            RecursiveFilter(pole)

    def test_empty_poles(self):
        """Test that a filter needs a pole."""
        with pytest.raises(InvalidKernel):
            RecursiveFilter(())

    def test_scalar_pole(self):
        """Test that a scalar pole becomes a 1-tuple."""
        assert RecursiveFilter(0.5).poles == (0.5,)

    def test_default_gain(self):
        """Test the unit-DC-gain normalization."""
        f = RecursiveFilter((-0.5, 0.25))
        expected = (1.5 * 3.0) * (0.75 * -3.0)
        assert f.gain == pytest.approx(expected)

    def test_explicit_gain(self):
        """Test that an explicit gain is kept."""
        assert RecursiveFilter(0.5, gain=2.0).gain == 2.0

    def test_zero_pole_skipped(self):
        """Test that zero poles do not contribute."""
        f = RecursiveFilter((0.0, -0.5))
        assert f.active_poles == (-0.5,)
        assert f.gain == pytest.approx(1.5 * 3.0)

    def test_complex(self):
        """Test complex pole detection."""
        assert RecursiveFilter(0.5j).is_complex
        assert not RecursiveFilter(0.5).is_complex

    @pytest.mark.parametrize("order", [2, 3, 4, 5])
    def test_spline_poles(self, order):
        """Test that spline pre-filters use the B-spline poles."""
        f = RecursiveFilter.spline(order)
        assert f.poles == SPLINE_POLES[order]
        assert all(-1.0 < p < 0.0 for p in f.poles)

    def test_cubic_spline(self):
        """Test the cubic pole and gain."""
        f = RecursiveFilter.spline(3)
        assert f.poles[0] == pytest.approx(math.sqrt(3.0) - 2.0)
        assert f.gain == pytest.approx(6.0)

    @pytest.mark.parametrize("order", [0, 1, 6])
    def test_spline_invalid_order(self, order):
        """Test orders without pre-filter poles."""
        with pytest.raises(ValueError, match="order"):
            RecursiveFilter.spline(order)

    def test_validate_extent_one(self):
        """Test that a single sample is accepted even in mirror mode."""
        RecursiveFilter(0.5).validate(1, BoundaryMode.MIRROR)
        with pytest.raises(InvalidExtent):
            RecursiveFilter(0.5).validate(0, BoundaryMode.MIRROR)

    def test_pole_horizon(self):
        """Test the decay horizon."""
        z = math.sqrt(3.0) - 2.0
        h = pole_horizon(z)
        assert abs(z) ** h < 1e-14
        assert pole_horizon(0.0) == 0
        assert RecursiveFilter((0.0, z)).horizons == (h,)


# ============================================================================
# Weight Helper Tests
# ============================================================================


class TestWeightHelpers:
    """Test Gaussian and uniform weight builders."""

    def test_gaussian_length_and_sum(self):
        """Test the truncation radius and normalization."""
        w = gaussian_weights(1.0, 4.0)
        assert len(w) == 9
        assert sum(w) == pytest.approx(1.0)
        assert w == tuple(reversed(w))

    def test_gaussian_zero_sigma(self):
        """Test the identity kernel for sigma=0."""
        assert gaussian_weights(0.0) == (1.0,)

    def test_uniform(self):
        """Test the box kernel."""
        assert uniform_weights(4) == (0.25, 0.25, 0.25, 0.25)

    def test_uniform_invalid(self):
        """Test that invalid box sizes are rejected."""
        with pytest.raises(InvalidKernel):
            uniform_weights(0)
        with pytest.raises(InvalidKernel):
            uniform_weights(1.5)
