"""Erosion filtering and normalization of raw height buffers.

The erosion pass is a first-order FIR/IIR blend that pulls every cell
towards its predecessor along the traversal direction:

    y[k] = f * y[k - 1] + (1 - f) * x[k],    y[0] = x[0]

It runs forward and backward along both grid axes so no direction is
favoured over another.
"""

import numpy as np
from numpy.typing import NDArray
from scipy import signal

# Target range for normalized heights.
NORMALIZE_RANGE = 255.0


def _blend_along_axis(
    data: NDArray[np.float64],
    filter_strength: float,
    axis: int,
    reverse: bool = False,
) -> NDArray[np.float64]:
    """Run one exponential blend pass along an axis.

    Args:
        data: 2D array to filter.
        filter_strength: Blend factor in [0, 1).
        axis: Axis to traverse.
        reverse: Traverse from the last element to the first.

    Returns:
        Filtered array, same shape as input.
    """
    if reverse:
        data = np.flip(data, axis=axis)

    b = [1.0 - filter_strength]
    a = [1.0, -filter_strength]
    # Initial state makes the first sample pass through unchanged.
    zi = filter_strength * np.take(data, [0], axis=axis)
    result, _ = signal.lfilter(b, a, data, axis=axis, zi=zi)

    if reverse:
        result = np.flip(result, axis=axis)
    return result


def erode_terrain(
    buffer: NDArray[np.float32],
    filter_strength: float,
) -> NDArray[np.float32]:
    """Smooth a raw height buffer in place to simulate water erosion.

    Args:
        buffer: Square 2D height buffer, modified in place.
        filter_strength: Erosion strength in [0, 1). Zero leaves the
            buffer untouched; values near one smooth aggressively.

    Returns:
        The same buffer, for chaining.
    """
    if filter_strength == 0 or buffer.size == 0:
        return buffer

    data = buffer.astype(np.float64)
    for axis in (1, 0):
        data = _blend_along_axis(data, filter_strength, axis)
        data = _blend_along_axis(data, filter_strength, axis, reverse=True)

    buffer[...] = data
    return buffer


def normalize_terrain(
    buffer: NDArray[np.float32],
    height_range: float = NORMALIZE_RANGE,
) -> NDArray[np.float32]:
    """Linearly rescale a buffer so its values span [0, height_range].

    The lowest cell maps to 0 and the highest to ``height_range``. A flat
    buffer has no range to stretch and maps to all zeros.

    Args:
        buffer: 2D height buffer.
        height_range: Value assigned to the highest cell.

    Returns:
        New float32 array with normalized heights.
    """
    current_min = float(buffer.min())
    current_max = float(buffer.max())

    if current_max <= current_min:
        return np.zeros_like(buffer, dtype=np.float32)

    scaled = (buffer.astype(np.float64) - current_min) / (current_max - current_min)
    return (scaled * height_range).astype(np.float32)
