"""
Numba-optimized line kernels.

Every kernel walks the lines of a ``(outer, extent, inner)`` view (see
``ndfilter.walker.line_view``) with ``prange``, so the lines of one axis pass
are processed in parallel. A line only reads its own input samples and only
writes its own output samples; no state is shared between iterations.

Boundary handling is precomputed once per pass as an *index map*: entry
``p`` holds the resolved source index of padded position ``p - left``, or
FILL_INDEX (-1) where the fill value applies.
"""

import numpy as np
from numba import njit, prange

# ============================================================================
# Finite Kernels
# ============================================================================


@njit(cache=True, nogil=True)
def _gather_line(src, o, q, index_map, cval, buf):
    for p in range(index_map.shape[0]):
        k = index_map[p]
        if k < 0:
            buf[p] = cval
        else:
            buf[p] = src[o, k, q]


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def correlate_lines(
    src: np.ndarray,
    dst: np.ndarray,
    weights: np.ndarray,
    index_map: np.ndarray,
    cval,
    symmetry: int,
) -> None:
    """
    Correlate every line with ``weights``.

    Args:
        src: Input lines [outer, n, inner]
        dst: Output lines [outer, n, inner] (modified in-place, never aliases src)
        weights: Kernel weights [size]
        index_map: Resolved padded positions [n + size - 1]
        cval: Fill value for FILL_INDEX entries
        symmetry: 1 symmetric, -1 antisymmetric, 0 general (odd sizes only for +-1)
    """
    outer, n, inner = src.shape
    size = weights.shape[0]
    half = size // 2
    n_lines = outer * inner

    for line in prange(n_lines):
        o = line // inner
        q = line % inner
        buf = np.empty(index_map.shape[0], dtype=src.dtype)
        _gather_line(src, o, q, index_map, cval, buf)

        if symmetry == 1:
            for i in range(n):
                acc = buf[i + half] * weights[half]
                for j in range(half):
                    acc += (buf[i + j] + buf[i + size - 1 - j]) * weights[j]
                dst[o, i, q] = acc
        elif symmetry == -1:
            for i in range(n):
                acc = buf[i + half] * weights[half]
                for j in range(half):
                    acc += (buf[i + j] - buf[i + size - 1 - j]) * weights[j]
                dst[o, i, q] = acc
        else:
            for i in range(n):
                acc = buf[i] * weights[0]
                for j in range(1, size):
                    acc += buf[i + j] * weights[j]
                dst[o, i, q] = acc


@njit(parallel=True, cache=True, nogil=True)
def extremum_lines(
    src: np.ndarray,
    dst: np.ndarray,
    size: int,
    index_map: np.ndarray,
    cval,
    maximum: bool,
) -> None:
    """
    Running minimum or maximum over ``size`` samples (monotonic wedge, O(n) per line).

    Args:
        src: Input lines [outer, n, inner]
        dst: Output lines [outer, n, inner] (modified in-place)
        size: Window length
        index_map: Resolved padded positions [n + size - 1]
        cval: Fill value for FILL_INDEX entries
        maximum: True for a maximum filter, False for a minimum filter
    """
    outer, n, inner = src.shape
    m = index_map.shape[0]
    n_lines = outer * inner

    for line in prange(n_lines):
        o = line // inner
        q = line % inner
        buf = np.empty(m, dtype=src.dtype)
        _gather_line(src, o, q, index_map, cval, buf)

        # Candidates in the current window, best first
        vals = np.empty(m, dtype=src.dtype)
        born = np.empty(m, dtype=np.int64)
        head = 0
        tail = 0
        for t in range(m):
            v = buf[t]
            if maximum:
                while tail > head and vals[tail - 1] <= v:
                    tail -= 1
            else:
                while tail > head and vals[tail - 1] >= v:
                    tail -= 1
            vals[tail] = v
            born[tail] = t
            tail += 1

            if born[head] <= t - size:
                head += 1
            if t >= size - 1:
                dst[o, t - size + 1, q] = vals[head]


# ============================================================================
# Recursive (IIR) Kernels
# ============================================================================


@njit(cache=True, nogil=True)
def _causal_init_mirror(c, z, horizon):
    n = c.shape[0]
    if horizon < n:
        # The pole has decayed below tolerance before the far edge
        s = c[0]
        zk = z
        for k in range(1, horizon):
            s += zk * c[k]
            zk *= z
        c[0] = s
    else:
        # Whole-sample symmetric history summed over one period of 2n - 2
        iz = 1.0 / z
        zn1 = z ** (n - 1)
        z2n2k = zn1 * zn1 * iz
        s = c[0] + zn1 * c[n - 1]
        zk = z
        for k in range(1, n - 1):
            s += (zk + z2n2k) * c[k]
            zk *= z
            z2n2k *= iz
        c[0] = s / (1.0 - zn1 * zn1)


@njit(cache=True, nogil=True)
def _causal_init_reflect(c, z):
    # Half-sample symmetric history, period 2n
    n = c.shape[0]
    zn = z**n
    s = c[0] + zn * c[n - 1]
    zk = z
    for k in range(1, n):
        s += zk * (c[k] + zn * c[n - 1 - k])
        zk *= z
    c[0] = c[0] + z * s / (1.0 - zn * zn)


@njit(cache=True, nogil=True)
def _causal_init_wrap(c, z):
    # Periodic history, period n
    n = c.shape[0]
    zn = z**n
    s = c[0]
    zk = z
    for k in range(1, n):
        s += zk * c[n - k]
        zk *= z
    c[0] = s / (1.0 - zn)


@njit(cache=True, nogil=True)
def _anticausal_init(c, z, init_kind):
    n = c.shape[0]
    if init_kind == 0:
        c[n - 1] = z / (z * z - 1.0) * (z * c[n - 2] + c[n - 1])
    elif init_kind == 1:
        c[n - 1] = z / (z - 1.0) * c[n - 1]
    else:
        zn = z**n
        s = c[n - 1]
        zj = z
        for j in range(1, n):
            s += zj * c[j - 1]
            zj *= z
        c[n - 1] = -z * s / (1.0 - zn)


@njit(parallel=True, cache=True, nogil=True)
def recursive_lines(
    src: np.ndarray,
    dst: np.ndarray,
    poles: np.ndarray,
    horizons: np.ndarray,
    gain,
    init_kind: int,
) -> None:
    """
    Apply a cascade of symmetric first-order recursive filters to every line.

    For each pole the line is seeded with the infinite-history value implied
    by the boundary extension, swept forward (causal), re-seeded at the far
    edge and swept backward (anti-causal). Lines must have at least 2 samples.

    Args:
        src: Input lines [outer, n, inner]
        dst: Output lines [outer, n, inner] (may alias src)
        poles: Non-zero poles [n_poles], same dtype as the lines
        horizons: Decay horizon per pole (samples) [n_poles]
        gain: Scale applied before the first pass
        init_kind: 0 mirror family, 1 reflect family, 2 wrap
    """
    outer, n, inner = src.shape
    n_lines = outer * inner

    for line in prange(n_lines):
        o = line // inner
        q = line % inner
        c = np.empty(n, dtype=dst.dtype)
        for i in range(n):
            c[i] = src[o, i, q] * gain

        for p in range(poles.shape[0]):
            z = poles[p]

            if init_kind == 0:
                _causal_init_mirror(c, z, horizons[p])
            elif init_kind == 1:
                _causal_init_reflect(c, z)
            else:
                _causal_init_wrap(c, z)
            for i in range(1, n):
                c[i] += z * c[i - 1]

            _anticausal_init(c, z, init_kind)
            for i in range(n - 2, -1, -1):
                c[i] = z * (c[i + 1] - c[i])

        for i in range(n):
            dst[o, i, q] = c[i]
