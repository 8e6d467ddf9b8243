"""Shared test fixtures for islandmesh tests."""

import pytest

from islandmesh.config import TerrainConfig
from islandmesh.generator import GenerationPipeline


@pytest.fixture
def small_config() -> TerrainConfig:
    """9x9 terrain with one octave, no falloff and an identity height curve."""
    return TerrainConfig(
        terrain_size=9,
        simplification=0,
        octaves=1,
        persistence=1.0,
        lacunarity=1.0,
        noise_scale=1.0,
        height_multiplier=1.0,
        seed=0,
        use_falloff=False,
    )


@pytest.fixture
def island_config() -> TerrainConfig:
    """65x65 island with a single octave so edge heights clamp to zero."""
    return TerrainConfig(
        terrain_size=65,
        octaves=1,
        noise_scale=20.0,
        height_multiplier=10.0,
        seed=42,
    )


@pytest.fixture
def pipeline() -> GenerationPipeline:
    """Fresh generation pipeline with an empty falloff cache."""
    return GenerationPipeline()
