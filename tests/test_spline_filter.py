"""
Tests for recursive filtering and the B-spline pre-filter.
"""

import numpy as np
import pytest

from ndfilter import (
    RecursiveFilter,
    UnstableFilter,
    correlate1d,
    recursive_filter_along_axis,
    spline_filter,
    spline_filter1d,
)

ALL_MODES = ["constant", "nearest", "mirror", "reflect", "wrap"]

# Sampled B-spline kernels (coefficients -> samples)
CUBIC_KERNEL = np.array([1.0, 4.0, 1.0]) / 6.0
QUINTIC_KERNEL = np.array([1.0, 26.0, 66.0, 26.0, 1.0]) / 120.0

# Cubic coefficients of [2.1, 8.4, 4.5, 7.0, 6.5, 9.2]. The reflect-family
# reference accumulates its seed in place, so it is only close to the exact seed.
MIRROR_FAMILY = [-3.42870813, 13.15741627, 1.19904306, 9.04641148, 4.615311, 11.4923445]
REFLECT_FAMILY = [0.07782003, 12.21089756, 1.47858971, 8.8747436, 5.0224359, 10.03551282]


@pytest.fixture
def signal():
    """Random 1-D signal."""
    rng = np.random.default_rng(11)
    return rng.standard_normal(40)


# ============================================================================
# Known Values
# ============================================================================


class TestSplineValues:
    """Test pre-filter output against known coefficients."""

    def test_three_samples(self):
        """Test the cubic pre-filter on a 3-sample line."""
        np.testing.assert_allclose(spline_filter1d(np.array([0.1, 0.5, 0.5])), [-0.2, 0.7, 0.4])

    def test_five_samples(self):
        """Test the cubic pre-filter on a 5-sample line."""
        result = spline_filter1d(np.array([0.3, 0.2, 0.5, -0.1, 0.4]))
        np.testing.assert_allclose(
            result, [0.47321429, -0.04642857, 0.9125, -0.60357143, 0.90178571], atol=1e-7
        )

    @pytest.mark.parametrize(
        "mode,expected,atol",
        [
            ("mirror", MIRROR_FAMILY, 1e-6),
            ("constant", MIRROR_FAMILY, 1e-6),
            ("reflect", REFLECT_FAMILY, 1e-3),
            ("nearest", REFLECT_FAMILY, 1e-3),
        ],
    )
    def test_mode_families(self, mode, expected, atol):
        """Test that constant shares the mirror seed and nearest the reflect seed."""
        data = np.array([2.1, 8.4, 4.5, 7.0, 6.5, 9.2])
        np.testing.assert_allclose(spline_filter1d(data, 3, mode=mode), expected, atol=atol)

    def test_two_dimensional(self):
        """Test the separable 2-D pre-filter."""
        data = np.array([[0.1, 0.5, 0.5], [0.5, 0.5, 0.5], [0.5, 0.5, 0.5]])
        expected = [[-0.725, 0.85, 0.325], [0.85, 0.4, 0.55], [0.325, 0.55, 0.475]]
        np.testing.assert_allclose(spline_filter(data), expected, atol=1e-12)


# ============================================================================
# Reconstruction Properties
# ============================================================================


class TestReconstruction:
    """Test that sampling the spline reproduces the input."""

    @pytest.mark.parametrize("mode", ["mirror", "reflect", "wrap"])
    def test_cubic(self, signal, mode):
        """Test cubic coefficients against the sampled cubic B-spline."""
        coeffs = spline_filter1d(signal, 3, mode=mode)
        np.testing.assert_allclose(correlate1d(coeffs, CUBIC_KERNEL, mode=mode), signal, atol=1e-10)

    @pytest.mark.parametrize("mode", ["mirror", "reflect", "wrap"])
    def test_quintic(self, signal, mode):
        """Test quintic coefficients against the sampled quintic B-spline."""
        coeffs = spline_filter1d(signal, 5, mode=mode)
        np.testing.assert_allclose(
            correlate1d(coeffs, QUINTIC_KERNEL, mode=mode), signal, atol=1e-10
        )

    def test_short_line_exact_seed(self, mode="mirror"):
        """Test reconstruction on a line shorter than the pole horizon."""
        data = np.array([1.0, -2.0, 0.5, 3.0])
        coeffs = spline_filter1d(data, 3, mode=mode)
        np.testing.assert_allclose(correlate1d(coeffs, CUBIC_KERNEL, mode=mode), data, atol=1e-12)

    def test_separable_2d(self):
        """Test 2-D reconstruction along both axes."""
        rng = np.random.default_rng(5)
        data = rng.random((8, 10))
        coeffs = spline_filter(data, 3, mode="reflect")
        resampled = correlate1d(
            correlate1d(coeffs, CUBIC_KERNEL, axis=0, mode="reflect"),
            CUBIC_KERNEL,
            axis=1,
            mode="reflect",
        )
        np.testing.assert_allclose(resampled, data, atol=1e-10)


# ============================================================================
# Edge Cases
# ============================================================================


class TestSplineEdgeCases:
    """Test degenerate orders, shapes and modes."""

    @pytest.mark.parametrize("order", [0, 1])
    def test_low_orders_copy(self, order):
        """Test that orders 0 and 1 return a float64 copy."""
        data = np.array([1, 2, 3], dtype=np.int32)
        result = spline_filter1d(data, order)
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, data)
        assert not np.shares_memory(result, data)

    def test_double_precision_output(self):
        """Test that float32 input gives float64 coefficients."""
        assert spline_filter(np.ones((3, 3), dtype=np.float32)).dtype == np.float64

    @pytest.mark.parametrize("order", [-1, 6])
    def test_invalid_order(self, order):
        """Test that unsupported orders are rejected."""
        with pytest.raises(ValueError, match="order"):
            spline_filter1d(np.ones(4), order)

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_single_sample(self, mode):
        """Test that a single sample comes back unchanged in every mode."""
        np.testing.assert_array_equal(spline_filter1d(np.array([4.0]), 3, mode=mode), [4.0])

    @pytest.mark.parametrize("mode", ALL_MODES)
    @pytest.mark.parametrize("order", [2, 3, 4, 5])
    def test_constant_preserved(self, mode, order):
        """Test that constant lines are preserved."""
        data = np.full(7, -1.25)
        np.testing.assert_allclose(spline_filter1d(data, order, mode=mode), data, rtol=1e-12)

    def test_axis_selection(self):
        """Test that only the selected axis is filtered."""
        rng = np.random.default_rng(9)
        data = rng.random((4, 6))
        result = spline_filter1d(data, 3, axis=0)
        for j in range(data.shape[1]):
            np.testing.assert_allclose(result[:, j], spline_filter1d(data[:, j], 3), atol=1e-14)


# ============================================================================
# Recursive Filter Tests
# ============================================================================


class TestRecursiveFilterAlongAxis:
    """Test the general recursive filter entry point."""

    @pytest.mark.parametrize("mode", ALL_MODES)
    @pytest.mark.parametrize("pole", [1.0, -1.0, 2.0])
    def test_unstable_pole_rejected(self, mode, pole):
        """Test that unstable poles fail before any data is read."""
        with pytest.raises(UnstableFilter):
            recursive_filter_along_axis(np.ones(5), 0, pole, mode)

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_zero_input(self, mode):
        """Test that zero lines stay zero."""
        result = recursive_filter_along_axis(np.zeros((3, 5)), 1, -0.4, mode)
        np.testing.assert_array_equal(result, 0.0)

    @pytest.mark.parametrize("mode", ALL_MODES)
    @pytest.mark.parametrize("pole", [0.5, -0.7, 0.95])
    @pytest.mark.parametrize("length", [2, 3, 10, 200])
    def test_steady_state(self, mode, pole, length):
        """Test that a constant line of any length is returned unchanged."""
        result = recursive_filter_along_axis(np.full(length, 4.0), 0, pole, mode)
        np.testing.assert_allclose(result, 4.0, rtol=1e-9)

    def test_zero_pole_identity(self, signal):
        """Test that a zero pole is the identity."""
        result = recursive_filter_along_axis(signal, 0, 0.0, "reflect")
        np.testing.assert_array_equal(result, signal)

    def test_pole_cascade_order_independent(self, signal):
        """Test that two single-pole passes equal one two-pole pass."""
        p1, p2 = RecursiveFilter.spline(4).poles
        cascaded = recursive_filter_along_axis(
            recursive_filter_along_axis(signal, 0, p1, "mirror"), 0, p2, "mirror"
        )
        combined = recursive_filter_along_axis(signal, 0, (p1, p2), "mirror")
        np.testing.assert_allclose(cascaded, combined, atol=1e-12)

    def test_complex_pole(self, signal):
        """Test that a complex pole promotes to complex and keeps DC gain."""
        result = recursive_filter_along_axis(np.full(6, 2.0), 0, 0.3 + 0.2j, "reflect")
        assert np.iscomplexobj(result)
        np.testing.assert_allclose(result, 2.0, atol=1e-12)

    def test_float32_lines(self):
        """Test that float32 input is filtered in float32."""
        data = np.linspace(0.0, 1.0, 12, dtype=np.float32)
        result = recursive_filter_along_axis(data, 0, RecursiveFilter.spline(3), "mirror")
        assert result.dtype == np.float32
        np.testing.assert_allclose(result, spline_filter1d(data), rtol=1e-4, atol=1e-5)
