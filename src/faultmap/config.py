"""Heightmap generation configuration loaded from TOML files."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field


class FaultFractalConfig(BaseModel):
    """Parameters for the fault formation fractal generator."""

    size: int = Field(default=129, description="Side length of the square grid")
    iterations: int = Field(default=64, description="Number of fault lines to draw")
    min_delta: int = Field(
        default=5, description="Height added by the last fault line"
    )
    max_delta: int = Field(
        default=100, description="Height added by the first fault line"
    )
    filter: float = Field(
        default=0.3,
        description="Erosion strength in [0, 1); 0 disables smoothing",
    )
    seed: int | None = Field(
        default=None, description="Random seed (None = time based)"
    )
    height_scale: float = Field(
        default=1.0, description="Multiplier applied to scaled height lookups"
    )


class Config(BaseModel):
    """Complete configuration file contents."""

    heightmap: FaultFractalConfig = Field(default_factory=FaultFractalConfig)


def load_config(config_path: Path) -> Config:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return Config.model_validate(data)


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))


def _configs_dir() -> Path:
    return Path(__file__).parent / "configs"
