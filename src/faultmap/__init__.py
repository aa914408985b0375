"""Fault formation fractal heightmap generation.

Builds square integer heightfields by lifting one side of random fault
lines, eroding the result with an FIR filter and normalizing it.
"""

from .config import Config, FaultFractalConfig, load_config
from .erosion import NORMALIZE_RANGE, erode_terrain, normalize_terrain
from .exceptions import HeightMapError, InvalidParameterError
from .fault_fractal import (
    FaultFractalHeightMap,
    generate_heightmap,
    height_variance_schedule,
    validate_parameters,
)
from .heightmap import AbstractHeightMap
from .persistence import load_heightmap, save_heightmap, save_raw

__all__ = [
    # Heightmaps
    "AbstractHeightMap",
    "FaultFractalHeightMap",
    "generate_heightmap",
    "height_variance_schedule",
    "validate_parameters",
    # Filtering
    "NORMALIZE_RANGE",
    "erode_terrain",
    "normalize_terrain",
    # Config
    "Config",
    "FaultFractalConfig",
    "load_config",
    # Persistence
    "load_heightmap",
    "save_heightmap",
    "save_raw",
    # Exceptions
    "HeightMapError",
    "InvalidParameterError",
]
