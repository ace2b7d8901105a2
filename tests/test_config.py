"""
Tests for FilterConfig and the validation decorators.
"""

import numba
import pytest

from ndfilter import BoundaryMode, FilterConfig
from ndfilter.validators import validate_choices, validate_positive, validate_range

# ============================================================================
# FilterConfig Tests
# ============================================================================


class TestFilterConfig:
    """Test FilterConfig dataclass."""

    def test_default_initialization(self):
        """Test default FilterConfig initialization."""
        config = FilterConfig()

        assert config.mode == "reflect"
        assert config.cval == 0.0
        assert config.truncate == 4.0
        assert config.num_threads is None
        assert config.boundary_mode is BoundaryMode.REFLECT

    def test_mode_normalized(self):
        """Test that the mode name is normalized to lower case."""
        assert FilterConfig(mode="WRAP").mode == "wrap"
        assert FilterConfig(mode=BoundaryMode.MIRROR).boundary_mode is BoundaryMode.MIRROR

    def test_invalid_mode(self):
        """Test that invalid mode raises error."""
        with pytest.raises(ValueError, match="mode"):
            FilterConfig(mode="periodic")

    def test_invalid_truncate(self):
        """Test that non-positive truncate raises error."""
        with pytest.raises(ValueError, match="truncate"):
            FilterConfig(truncate=0.0)

    def test_invalid_num_threads(self):
        """Test thread count bounds."""
        with pytest.raises(ValueError, match="num_threads"):
            FilterConfig(num_threads=0)
        with pytest.raises(ValueError, match="num_threads"):
            FilterConfig(num_threads=numba.config.NUMBA_NUM_THREADS + 1)

    def test_valid_num_threads(self):
        """Test that one thread is always allowed."""
        assert FilterConfig(num_threads=1).num_threads == 1


# ============================================================================
# Validator Tests
# ============================================================================


@validate_range(0, 5, "order")
def _order(data, order=3):
    return order


@validate_positive("size")
def _size(data, size):
    return size


@validate_choices({"reflect", "wrap"}, "mode", 2)
def _mode(data, size, mode="reflect"):
    return mode


class TestValidators:
    """Test the validation decorators."""

    def test_range_positional_and_keyword(self):
        """Test that both calling styles are checked."""
        assert _order(None, 4) == 4
        assert _order(None, order=0) == 0
        with pytest.raises(ValueError, match="outside valid range"):
            _order(None, 6)
        with pytest.raises(ValueError, match="order"):
            _order(None, order=-1)

    def test_range_default_passes(self):
        """Test that omitted arguments fall through to the default."""
        assert _order(None) == 3

    def test_range_type(self):
        """Test that non-numbers are rejected."""
        with pytest.raises(TypeError, match="order"):
            _order(None, "3")
        with pytest.raises(TypeError):
            _order(None, True)

    def test_positive(self):
        """Test positive validation."""
        assert _size(None, 2) == 2
        with pytest.raises(ValueError, match="must be positive"):
            _size(None, 0)
        with pytest.raises(ValueError, match="size"):
            _size(None, size=-3)

    def test_choices_case_insensitive(self):
        """Test choice validation ignores case."""
        assert _mode(None, 3, "WRAP") == "WRAP"
        with pytest.raises(ValueError, match="Valid options are: reflect, wrap"):
            _mode(None, 3, mode="mirror")

    def test_choices_type(self):
        """Test that non-string choices are rejected."""
        with pytest.raises(TypeError, match="mode"):
            _mode(None, 3, 1)
