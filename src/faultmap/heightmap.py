"""Generic square heightmap storage shared by all generators."""

import math
import numbers
from abc import ABC, abstractmethod

import numpy as np
import structlog
from numpy.typing import NDArray

from .exceptions import HeightMapError, InvalidParameterError

logger = structlog.get_logger()


def require_int(name: str, value) -> int:
    """Return ``value`` as an int, rejecting bools and non-integral types.

    Raises:
        InvalidParameterError: If value is not an integer.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(
            f"{name} must be an integer (got {value!r})"
        )
    return int(value)


def is_valid_filter(value) -> bool:
    """True when value is a real number in [0, 1). NaN is rejected."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return 0 <= value < 1


class AbstractHeightMap(ABC):
    """Square grid of integer heights.

    Heights are stored row-major as an int32 array of shape (size, size)
    indexed ``[z, x]``, so the linear offset of point (x, z) is
    ``z * size + x``. Subclasses fill the grid in ``load()``.
    """

    def __init__(self, size: int, filter_strength: float = 0.0):
        self._size = 0
        self._filter = 0.0
        self._height_scale = 1.0
        self._height_data: NDArray[np.int32] | None = None

        self.set_size(size)
        self.set_filter(filter_strength)

    @abstractmethod
    def load(self) -> bool:
        """Generate or read the height data. Returns True on success."""

    @property
    def size(self) -> int:
        return self._size

    @property
    def filter(self) -> float:
        return self._filter

    @property
    def height_scale(self) -> float:
        return self._height_scale

    @property
    def is_loaded(self) -> bool:
        return self._height_data is not None

    @property
    def height_map(self) -> NDArray[np.int32] | None:
        """Read-only view of the current grid, or None when unloaded."""
        if self._height_data is None:
            return None
        view = self._height_data.view()
        view.flags.writeable = False
        return view

    def set_size(self, size: int) -> None:
        """Set the grid side length. Takes effect on the next load().

        Raises:
            InvalidParameterError: If size is not greater than zero.
        """
        size = require_int("size", size)
        if size <= 0:
            raise InvalidParameterError("size must be greater than zero")
        self._size = size

    def set_filter(self, filter_strength: float) -> None:
        """Set the erosion filter strength used by load().

        Raises:
            InvalidParameterError: If the value is outside [0, 1).
        """
        if not is_valid_filter(filter_strength):
            raise InvalidParameterError(
                f"filter must be in [0, 1) (got {filter_strength!r})"
            )
        self._filter = float(filter_strength)

    def set_height_scale(self, scale: float) -> None:
        """Set the multiplier applied by the scaled height accessors."""
        self._height_scale = float(scale)

    def unload(self) -> None:
        """Release the current grid."""
        if self._height_data is not None:
            logger.debug("heightmap_unloaded", size=self._size)
        self._height_data = None

    def set_height_at_point(self, height: int, x: int, z: int) -> None:
        """Store a height at grid point (x, z)."""
        self._require_loaded()[self._check_point(x, z)] = height

    def get_true_height_at_point(self, x: int, z: int) -> int:
        """Return the unscaled height at grid point (x, z)."""
        return int(self._require_loaded()[self._check_point(x, z)])

    def get_scaled_height_at_point(self, x: int, z: int) -> float:
        """Return the height at (x, z) multiplied by the height scale."""
        return self.get_true_height_at_point(x, z) * self._height_scale

    def get_interpolated_height(self, x: float, z: float) -> float:
        """Bilinearly interpolate the scaled height at a fractional point.

        Coordinates are clamped to the grid, so points past an edge take
        the edge height.
        """
        self._require_loaded()
        last = self._size - 1
        x = min(max(x, 0.0), float(last))
        z = min(max(z, 0.0), float(last))

        x0, z0 = int(math.floor(x)), int(math.floor(z))
        x1, z1 = min(x0 + 1, last), min(z0 + 1, last)
        fx, fz = x - x0, z - z0

        top = (
            self.get_scaled_height_at_point(x0, z0) * (1 - fx)
            + self.get_scaled_height_at_point(x1, z0) * fx
        )
        bottom = (
            self.get_scaled_height_at_point(x0, z1) * (1 - fx)
            + self.get_scaled_height_at_point(x1, z1) * fx
        )
        return top * (1 - fz) + bottom * fz

    def _set_height_data(self, heights: NDArray[np.int32]) -> None:
        if heights.shape != (self._size, self._size):
            raise HeightMapError(
                f"Expected {self._size}x{self._size} heights, got {heights.shape}"
            )
        self._height_data = heights.astype(np.int32, copy=False)

    def _require_loaded(self) -> NDArray[np.int32]:
        if self._height_data is None:
            raise HeightMapError("Heightmap is not loaded")
        return self._height_data

    def _check_point(self, x: int, z: int) -> tuple[int, int]:
        if not (0 <= x < self._size and 0 <= z < self._size):
            raise IndexError(
                f"Point ({x}, {z}) outside {self._size}x{self._size} heightmap"
            )
        return z, x
