"""Heightmap persistence: save and load generated grids."""

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import structlog
from numpy.typing import NDArray

from .exceptions import HeightMapError
from .fault_fractal import FaultFractalHeightMap

logger = structlog.get_logger()

FORMAT_VERSION = 1


def save_heightmap(path: Path, heightmap: FaultFractalHeightMap) -> None:
    """Save a generated heightmap to disk.

    Uses numpy's compressed .npz format with the generation parameters
    stored alongside the grid.

    Args:
        path: Output path (should end with .npz).
        heightmap: Loaded heightmap to save.

    Raises:
        HeightMapError: If the heightmap is not loaded.
    """
    heights = heightmap.height_map
    if heights is None:
        raise HeightMapError("Cannot save a heightmap that is not loaded")

    metadata = {
        "version": FORMAT_VERSION,
        "algorithm": "fault_fractal",
        "seed": heightmap.seed,
        "size": heightmap.size,
        "iterations": heightmap.iterations,
        "min_delta": heightmap.min_delta,
        "max_delta": heightmap.max_delta,
        "filter": heightmap.filter,
        "height_scale": heightmap.height_scale,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        heights=heights,
        metadata=json.dumps(metadata).encode("utf-8"),
    )

    logger.info("heightmap_saved", path=str(path), size=heightmap.size)


def load_heightmap(path: Path) -> tuple[NDArray[np.int32], dict]:
    """Load a heightmap grid from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (heights array, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Heightmap file not found: {path}")

    with np.load(path) as data:
        if "heights" not in data:
            raise ValueError("Invalid heightmap file: missing 'heights' array")
        heights = data["heights"]

        if "metadata" in data:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        else:
            metadata = {}

    if heights.ndim != 2 or heights.shape[0] != heights.shape[1]:
        raise ValueError(f"Invalid heightmap file: grid shape {heights.shape}")

    logger.info("heightmap_loaded", path=str(path), size=heights.shape[0])
    return heights.astype(np.int32, copy=False), metadata


def save_raw(path: Path, heightmap: FaultFractalHeightMap) -> None:
    """Dump heights as big-endian int32 values in row-major order.

    Args:
        path: Output file path.
        heightmap: Loaded heightmap to dump.

    Raises:
        HeightMapError: If the heightmap is not loaded.
    """
    heights = heightmap.height_map
    if heights is None:
        raise HeightMapError("Cannot save a heightmap that is not loaded")

    path.write_bytes(heights.astype(">i4").tobytes())
    logger.info("heightmap_saved", path=str(path), size=heightmap.size, raw=True)
