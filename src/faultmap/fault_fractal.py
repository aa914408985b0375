"""Fault formation fractal heightmap generator.

Terrain is built by simulating earthquakes: a random line is drawn
through the grid and every cell on one side of it is lifted. The amount
lifted shrinks linearly from ``max_delta`` on the first fault to roughly
``min_delta`` on the last. The accumulated buffer is then eroded with an
FIR filter and normalized into integer heights.
"""

import time

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import FaultFractalConfig
from .erosion import erode_terrain, normalize_terrain
from .exceptions import InvalidParameterError
from .heightmap import AbstractHeightMap, is_valid_filter, require_int

logger = structlog.get_logger()

_SEED_MASK = 0xFFFFFFFFFFFFFFFF


def height_variance_schedule(
    iterations: int,
    min_delta: int,
    max_delta: int,
) -> list[int]:
    """Per-fault height increments, in drawing order.

    Uses truncating integer division for the scaling term, so the
    schedule for 4 iterations over [0, 100] is 100, 75, 50, 25.
    """
    return [
        max_delta - ((max_delta - min_delta) * i) // iterations
        for i in range(iterations)
    ]


def validate_parameters(
    size: int,
    iterations: int,
    min_delta: int,
    max_delta: int,
    filter_strength: float,
) -> None:
    """Check generator parameters.

    Raises:
        InvalidParameterError: If an integer parameter is not an int,
            size or iterations is not positive, min_delta exceeds
            max_delta, or the filter is not a number in [0, 1).
    """
    size = require_int("size", size)
    iterations = require_int("iterations", iterations)
    min_delta = require_int("min_delta", min_delta)
    max_delta = require_int("max_delta", max_delta)

    problems = []
    if size <= 0:
        problems.append(f"size must be greater than zero (got {size})")
    if iterations <= 0:
        problems.append(f"iterations must be greater than zero (got {iterations})")
    if min_delta > max_delta:
        problems.append(
            f"min_delta ({min_delta}) must not exceed max_delta ({max_delta})"
        )
    if not is_valid_filter(filter_strength):
        problems.append(f"filter must be in [0, 1) (got {filter_strength!r})")

    if problems:
        raise InvalidParameterError("; ".join(problems))


class FaultFractalHeightMap(AbstractHeightMap):
    """Heightmap generated with the fault formation algorithm.

    The random source is seeded once at construction. Every ``load()``
    keeps drawing from it, so only the first grid of a freshly seeded
    instance is reproducible.

    Instances are not thread safe; serialize calls to ``load()``.
    """

    def __init__(
        self,
        size: int,
        iterations: int,
        min_delta: int,
        max_delta: int,
        filter_strength: float,
        seed: int | None = None,
    ):
        """Validate parameters, seed the random source and generate.

        Args:
            size: Side length of the terrain grid.
            iterations: Number of fault lines to draw.
            min_delta: Height added by the final fault line.
            max_delta: Height added by the first fault line.
            filter_strength: Erosion strength in [0, 1). 0.2-0.4 gives
                natural looking results.
            seed: Random seed. None seeds from the current time.

        Raises:
            InvalidParameterError: If any parameter is out of range.
        """
        validate_parameters(size, iterations, min_delta, max_delta, filter_strength)
        super().__init__(size, filter_strength)

        self._iterations = int(iterations)
        self._min_delta = int(min_delta)
        self._max_delta = int(max_delta)

        if seed is None:
            seed = time.time_ns()
        seed = require_int("seed", seed)
        self._seed = seed
        self._rng = np.random.default_rng(seed & _SEED_MASK)

        self.load()

    @classmethod
    def from_config(cls, config: FaultFractalConfig) -> "FaultFractalHeightMap":
        """Build and generate a heightmap from a configuration model."""
        heightmap = cls(
            size=config.size,
            iterations=config.iterations,
            min_delta=config.min_delta,
            max_delta=config.max_delta,
            filter_strength=config.filter,
            seed=config.seed,
        )
        heightmap.set_height_scale(config.height_scale)
        return heightmap

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def min_delta(self) -> int:
        return self._min_delta

    @property
    def max_delta(self) -> int:
        return self._max_delta

    def set_iterations(self, iterations: int) -> None:
        """Set the number of fault lines. Call load() to regenerate.

        Raises:
            InvalidParameterError: If iterations is not greater than zero.
        """
        iterations = require_int("iterations", iterations)
        if iterations <= 0:
            raise InvalidParameterError("iterations must be greater than zero")
        self._iterations = iterations

    def set_min_delta(self, min_delta: int) -> None:
        """Set the smallest fault height increment. Call load() to regenerate.

        Raises:
            InvalidParameterError: If min_delta exceeds the current max_delta.
        """
        min_delta = require_int("min_delta", min_delta)
        if min_delta > self._max_delta:
            raise InvalidParameterError(
                f"min_delta ({min_delta}) must not exceed "
                f"the current max_delta ({self._max_delta})"
            )
        self._min_delta = min_delta

    def set_max_delta(self, max_delta: int) -> None:
        """Set the largest fault height increment. Call load() to regenerate.

        Raises:
            InvalidParameterError: If max_delta is below the current min_delta.
        """
        max_delta = require_int("max_delta", max_delta)
        if max_delta < self._min_delta:
            raise InvalidParameterError(
                f"max_delta ({max_delta}) must not be less than "
                f"the current min_delta ({self._min_delta})"
            )
        self._max_delta = max_delta

    def load(self) -> bool:
        """Generate the heightfield from the current parameters.

        Returns:
            True once the new grid is in place.
        """
        if self.is_loaded:
            self.unload()

        buffer = self._accumulate_faults()
        erode_terrain(buffer, self.filter)
        normalized = normalize_terrain(buffer)
        self._set_height_data(self._transfer(normalized))

        logger.info(
            "heightmap_created",
            algorithm="fault_fractal",
            size=self.size,
            iterations=self._iterations,
        )
        return True

    def _accumulate_faults(self) -> NDArray[np.float32]:
        """Raise one side of each random fault line.

        Returns:
            Raw float buffer indexed [x, z].
        """
        size = self.size
        buffer = np.zeros((size, size), dtype=np.float32)

        # A single cell has no second point to define a line.
        if size == 1:
            return buffer

        xs, zs = np.meshgrid(np.arange(size), np.arange(size), indexing="ij")
        schedule = height_variance_schedule(
            self._iterations, self._min_delta, self._max_delta
        )

        for height_variance in schedule:
            x1, z1 = self._random_point()
            x2, z2 = self._random_point()
            while x1 == x2 and z1 == z2:
                x2, z2 = self._random_point()

            dx1, dz1 = x2 - x1, z2 - z1
            # Sign of the cross product picks the side relative to the
            # direction from point 1 to point 2.
            cross = (xs - x1) * dz1 - dx1 * (zs - z1)
            buffer[cross > 0] += height_variance

        return buffer

    def _random_point(self) -> tuple[int, int]:
        x, z = self._rng.integers(0, self.size, size=2)
        return int(x), int(z)

    @staticmethod
    def _transfer(buffer: NDArray[np.float32]) -> NDArray[np.int32]:
        """Convert an [x, z] float buffer into the [row=z, col=x] grid.

        Heights are truncated toward zero. The transpose is what places
        buffer[i][j] at grid[j][i].
        """
        return np.trunc(buffer).astype(np.int32).T.copy()


def generate_heightmap(config: FaultFractalConfig) -> FaultFractalHeightMap:
    """Generate a fault fractal heightmap from configuration.

    Args:
        config: Generation parameters.

    Returns:
        A loaded FaultFractalHeightMap.

    Raises:
        InvalidParameterError: If the configuration is invalid.
    """
    return FaultFractalHeightMap.from_config(config)
