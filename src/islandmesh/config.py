"""Terrain configuration models and TOML loading."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .curves import HeightCurve, KeyframeCurve, coerce_curve


class TerrainConfig(BaseModel):
    """Complete terrain mesh generation configuration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Terrain settings
    terrain_size: int = Field(default=241, description="Grid extent in cells per side")
    simplification: int = Field(
        default=0, description="Mesh decimation level (0 = full detail)"
    )
    seed: int = Field(default=0, description="Random seed for the noise offsets")
    use_32bit_index: bool = Field(
        default=False, description="Use 32-bit triangle indices instead of 16-bit"
    )

    # Noise settings
    noise_scale: float = Field(default=3.5, description="Scale of the sampled noise")
    noise_offset_x: float = Field(default=0.0, description="Noise offset along x")
    noise_offset_z: float = Field(default=0.0, description="Noise offset along z")
    height_multiplier: float = Field(
        default=33.7, description="Vertical scale applied after the height curve"
    )
    height_curve: HeightCurve = Field(
        default_factory=KeyframeCurve.linear,
        description="Curve reshaping normalized heights",
    )

    # Advanced noise settings
    octaves: int = Field(default=4, description="Number of noise layers")
    persistence: float = Field(default=0.25, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=3.0, description="Frequency multiplier per octave")

    # Falloff settings
    use_falloff: bool = Field(default=True, description="Shape the terrain into an island")
    falloff_start: float = Field(default=2.09, description="Falloff curve exponent")
    falloff_end: float = Field(default=2.84, description="Falloff curve transition scale")

    # Debugging
    print_vertex_count: bool = Field(
        default=False, description="Log the vertex count after each generation"
    )

    @field_validator("height_curve", mode="before")
    @classmethod
    def _coerce_height_curve(cls, value: Any) -> HeightCurve:
        return coerce_curve(value)

    @field_serializer("height_curve")
    def _serialize_height_curve(self, curve: HeightCurve) -> list[dict[str, float]] | str:
        if isinstance(curve, KeyframeCurve):
            return curve.to_keyframes()
        return repr(curve)

    @property
    def increment(self) -> int:
        """Grid stride for the configured simplification level."""
        return 1 if self.simplification == 0 else self.simplification * 2

    @property
    def vertices_per_line(self) -> int:
        """Vertices along one side of the decimated grid."""
        return (self.terrain_size - 1) // self.increment + 1


def config_overrides(config: TerrainConfig, **changes: Any) -> TerrainConfig:
    """Return a copy of config with the given fields replaced.

    The copy is re-validated, so keyframe lists and callables are accepted
    for ``height_curve``.
    """
    data = {name: getattr(config, name) for name in TerrainConfig.model_fields}
    data.update(changes)
    return TerrainConfig.model_validate(data)


def load_config(config_path: Path) -> TerrainConfig:
    """Load terrain configuration from a TOML file.

    Parameters may sit at the top level or under a ``[terrain]`` table.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed TerrainConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return TerrainConfig.model_validate(data.get("terrain", data))


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
    # src/islandmesh/config.py -> repository root
    return Path(__file__).parent.parent.parent / "configs"
