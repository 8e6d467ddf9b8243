"""Terrain mesh generation orchestration."""

import structlog

from .config import TerrainConfig
from .exceptions import ConfigurationError
from .falloff import FalloffCache
from .heightfield import HeightField
from .mesh import MAX_16BIT_VERTICES, MeshBuffers, MeshTessellator
from .noise import NoiseField, derive_seeded_offset

logger = structlog.get_logger()


def validate_config(config: TerrainConfig) -> None:
    """Reject configurations that would produce degenerate geometry.

    Args:
        config: Terrain configuration to check.

    Raises:
        ConfigurationError: If the configuration is unusable.
    """
    if config.terrain_size < 2:
        raise ConfigurationError(
            f"terrain_size must be at least 2, got {config.terrain_size}"
        )
    if config.simplification < 0:
        raise ConfigurationError(
            f"simplification must be non-negative, got {config.simplification}"
        )
    if config.octaves < 1:
        raise ConfigurationError(f"octaves must be at least 1, got {config.octaves}")

    vertices_per_line = config.vertices_per_line
    if vertices_per_line < 2:
        raise ConfigurationError(
            f"simplification {config.simplification} leaves a single vertex per line "
            f"for terrain_size {config.terrain_size}"
        )

    slots = (vertices_per_line + 1) ** 2
    if not config.use_32bit_index and slots > MAX_16BIT_VERTICES:
        raise ConfigurationError(
            f"{slots} vertex slots exceed the 16-bit index limit of "
            f"{MAX_16BIT_VERTICES}; enable use_32bit_index or raise simplification"
        )


class GenerationPipeline:
    """Generates terrain meshes, keeping the falloff mask between calls.

    Not thread-safe: use one pipeline per worker.
    """

    def __init__(self) -> None:
        self.falloff_cache = FalloffCache()
        self.vertex_count: int | None = None

    def generate(self, config: TerrainConfig) -> MeshBuffers:
        """Generate a mesh from configuration.

        Args:
            config: Terrain configuration.

        Returns:
            Freshly computed MeshBuffers.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        validate_config(config)

        offset = derive_seeded_offset(
            config.seed, config.noise_offset_x, config.noise_offset_z
        )

        falloff_mask = None
        if config.use_falloff:
            falloff_mask = self.falloff_cache.get(
                config.terrain_size, config.falloff_start, config.falloff_end
            )

        height_field = HeightField(
            noise=NoiseField.from_config(config, offset),
            height_curve=config.height_curve,
            height_multiplier=config.height_multiplier,
            falloff_mask=falloff_mask,
        )

        mesh = MeshTessellator().tessellate(config, height_field)
        self.vertex_count = mesh.vertex_count

        logger.debug(
            "mesh_generated",
            seed=config.seed,
            terrain_size=config.terrain_size,
            simplification=config.simplification,
            vertices=mesh.vertex_count,
            triangles=mesh.triangle_count,
        )
        if config.print_vertex_count:
            logger.info("vertex_count", count=mesh.vertex_count)

        return mesh


def generate_mesh(config: TerrainConfig) -> MeshBuffers:
    """Generate a mesh with a one-off pipeline."""
    return GenerationPipeline().generate(config)
