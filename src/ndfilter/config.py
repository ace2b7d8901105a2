"""
Filter configuration for ndfilter calls.

Provides the configuration structure shared by every public filter function.
Any function that takes ``config=`` uses the config's values instead of its
own keyword arguments.
"""

from dataclasses import dataclass

import numba

from ndfilter.boundary import BoundaryMode
from ndfilter.constants import DEFAULT_CVAL, DEFAULT_MODE, DEFAULT_TRUNCATE


def check_num_threads(num_threads: int | None) -> None:
    """Raise ValueError unless num_threads is None or within Numba's thread pool."""
    if num_threads is None:
        return
    if not 1 <= num_threads <= numba.config.NUMBA_NUM_THREADS:
        raise ValueError(
            f"num_threads must be between 1 and {numba.config.NUMBA_NUM_THREADS}, "
            f"got {num_threads}"
        )


@dataclass
class FilterConfig:
    """
    Configuration for one or more filter calls.

    Attributes:
        mode: Boundary mode ("constant", "nearest", "mirror", "reflect", "wrap")
        cval: Fill value used by the "constant" mode
        truncate: Gaussian kernel radius in standard deviations
        num_threads: Worker threads for the line-parallel passes (None = Numba default)
    """

    mode: str = DEFAULT_MODE
    cval: float = DEFAULT_CVAL
    truncate: float = DEFAULT_TRUNCATE
    num_threads: int | None = None

    def __post_init__(self):
        """Validate configuration parameters."""
        # Raises ValueError for unknown names
        self.mode = BoundaryMode.parse(self.mode).value

        if self.truncate <= 0.0:
            raise ValueError(f"truncate must be positive, got {self.truncate}")

        check_num_threads(self.num_threads)

    @property
    def boundary_mode(self) -> BoundaryMode:
        return BoundaryMode(self.mode)
