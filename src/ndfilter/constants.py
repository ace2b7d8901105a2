"""
Constants and default values for ndfilter.

Centralizes magic numbers and configuration defaults for better maintainability.
"""

from __future__ import annotations

import math

# =============================================================================
# Boundary Handling
# =============================================================================

DEFAULT_MODE = "reflect"  # scipy.ndimage default
DEFAULT_CVAL = 0.0  # Fill value for "constant" mode

# Resolved index meaning "use the fill value" (constant mode only)
FILL_INDEX = -1

# Smallest extent each mode can resolve against
MIN_EXTENT = {
    "constant": 1,
    "nearest": 1,
    "mirror": 2,  # Period 2n - 2 is zero for n == 1
    "reflect": 1,
    "wrap": 1,
}

# =============================================================================
# Linear Filters
# =============================================================================

DEFAULT_TRUNCATE = 4.0  # Gaussian kernel radius in standard deviations
DEFAULT_UNIFORM_SIZE = 3

# Kernel symmetry classes (odd-length kernels only)
SYMMETRY_NONE = 0
SYMMETRY_SYMMETRIC = 1
SYMMETRY_ANTISYMMETRIC = -1

# =============================================================================
# Recursive (IIR) Filters
# =============================================================================

# Truncation tolerance of the geometric sum used for the causal seed
IIR_TOLERANCE = 1e-15

# Initial-condition families understood by the recursive kernel
INIT_MIRROR = 0
INIT_REFLECT = 1
INIT_WRAP = 2

# B-spline pre-filter poles per spline order
SPLINE_POLES = {
    2: (math.sqrt(8.0) - 3.0,),
    3: (math.sqrt(3.0) - 2.0,),
    4: (
        math.sqrt(664.0 - math.sqrt(438976.0)) + math.sqrt(304.0) - 19.0,
        math.sqrt(664.0 + math.sqrt(438976.0)) - math.sqrt(304.0) - 19.0,
    ),
    5: (
        math.sqrt(67.5 - math.sqrt(4436.25)) + math.sqrt(26.25) - 6.5,
        math.sqrt(67.5 + math.sqrt(4436.25)) - math.sqrt(26.25) - 6.5,
    ),
}

SPLINE_ORDER_MIN = 0
SPLINE_ORDER_MAX = 5
DEFAULT_SPLINE_ORDER = 3
DEFAULT_SPLINE_MODE = "mirror"

# =============================================================================
# Derivative Filters
# =============================================================================

DERIVATIVE_WEIGHTS = (-1.0, 0.0, 1.0)
SOBEL_SMOOTHING = (1.0, 2.0, 1.0)
PREWITT_SMOOTHING = (1.0, 1.0, 1.0)
