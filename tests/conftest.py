"""Shared test fixtures for heightmap tests."""

import tempfile
from pathlib import Path

import pytest

from faultmap.config import FaultFractalConfig
from faultmap.fault_fractal import FaultFractalHeightMap


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def small_config() -> FaultFractalConfig:
    """Small, seeded configuration that generates quickly."""
    return FaultFractalConfig(
        size=16, iterations=20, min_delta=0, max_delta=40, filter=0.3, seed=11
    )


@pytest.fixture
def small_heightmap(small_config: FaultFractalConfig) -> FaultFractalHeightMap:
    """Loaded heightmap built from small_config."""
    return FaultFractalHeightMap.from_config(small_config)


@pytest.fixture
def sample_config_toml() -> str:
    """Sample heightmap config as TOML string."""
    return """
[heightmap]
size = 24
iterations = 10
min_delta = 2
max_delta = 20
filter = 0.2
seed = 99
height_scale = 0.5
"""


@pytest.fixture
def config_file(temp_dir, sample_config_toml):
    """Create a temporary config file."""
    config_path = temp_dir / "test_config.toml"
    config_path.write_text(sample_config_toml)
    return config_path
