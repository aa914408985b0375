"""Tests for heightmap persistence."""

import json

import numpy as np
import pytest

from faultmap.exceptions import HeightMapError
from faultmap.persistence import load_heightmap, save_heightmap, save_raw


class TestSaveLoad:
    """Tests for .npz save and load."""

    def test_round_trip(self, temp_dir, small_heightmap):
        """Saved heights load back unchanged."""
        path = temp_dir / "map.npz"
        save_heightmap(path, small_heightmap)

        heights, metadata = load_heightmap(path)
        np.testing.assert_array_equal(heights, small_heightmap.height_map)
        assert heights.dtype == np.int32

    def test_metadata(self, temp_dir, small_heightmap):
        """Generation parameters are stored with the grid."""
        path = temp_dir / "map.npz"
        save_heightmap(path, small_heightmap)

        _, metadata = load_heightmap(path)
        assert metadata["version"] == 1
        assert metadata["algorithm"] == "fault_fractal"
        assert metadata["seed"] == 11
        assert metadata["size"] == 16
        assert metadata["iterations"] == 20
        assert metadata["min_delta"] == 0
        assert metadata["max_delta"] == 40
        assert metadata["filter"] == pytest.approx(0.3)
        assert "generated_at" in metadata

    def test_save_unloaded(self, temp_dir, small_heightmap):
        """An unloaded map cannot be saved."""
        small_heightmap.unload()
        with pytest.raises(HeightMapError):
            save_heightmap(temp_dir / "map.npz", small_heightmap)

    def test_load_missing_file(self, temp_dir):
        """Missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_heightmap(temp_dir / "missing.npz")

    def test_load_without_heights(self, temp_dir):
        """Files without a heights array are rejected."""
        path = temp_dir / "bad.npz"
        np.savez_compressed(path, other=np.zeros(3))
        with pytest.raises(ValueError):
            load_heightmap(path)

    def test_load_non_square(self, temp_dir):
        """Non-square grids are rejected."""
        path = temp_dir / "bad.npz"
        np.savez_compressed(path, heights=np.zeros((2, 3), dtype=np.int32))
        with pytest.raises(ValueError):
            load_heightmap(path)

    def test_load_without_metadata(self, temp_dir):
        """Metadata is optional."""
        path = temp_dir / "bare.npz"
        np.savez_compressed(path, heights=np.ones((2, 2), dtype=np.int32))
        heights, metadata = load_heightmap(path)
        assert metadata == {}
        assert heights.shape == (2, 2)


class TestSaveRaw:
    """Tests for raw int32 dumps."""

    def test_raw_layout(self, temp_dir, small_heightmap):
        """Heights are written big-endian, row-major."""
        path = temp_dir / "map.raw"
        save_raw(path, small_heightmap)

        data = path.read_bytes()
        assert len(data) == 16 * 16 * 4

        values = np.frombuffer(data, dtype=">i4").reshape(16, 16)
        np.testing.assert_array_equal(values, small_heightmap.height_map)
        assert int.from_bytes(data[4:8], "big") == small_heightmap.get_true_height_at_point(1, 0)

    def test_raw_unloaded(self, temp_dir, small_heightmap):
        """An unloaded map cannot be dumped."""
        small_heightmap.unload()
        with pytest.raises(HeightMapError):
            save_raw(temp_dir / "map.raw", small_heightmap)
