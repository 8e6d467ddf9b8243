"""Procedural island terrain mesh generation.

Layered gradient noise, an island falloff mask and a height curve are
combined into a height field, which is tessellated into vertex, UV,
triangle and normal buffers.
"""

from .config import TerrainConfig, config_overrides, find_config, load_config
from .curves import CallableCurve, HeightCurve, Keyframe, KeyframeCurve
from .exceptions import ConfigurationError, IslandMeshError, MeshFormatError
from .falloff import FalloffCache, build_falloff_mask, evaluate_falloff
from .generator import GenerationPipeline, generate_mesh, validate_config
from .heightfield import HeightField
from .mesh import MeshBuffers, MeshTessellator, compute_normals
from .noise import NoiseField, SeededOffset, derive_seeded_offset, perlin_noise
from .persistence import export_obj, load_mesh, save_mesh
from .validation import ValidationResult, validate_mesh

__all__ = [
    # Config
    "TerrainConfig",
    "config_overrides",
    "find_config",
    "load_config",
    # Curves
    "HeightCurve",
    "Keyframe",
    "KeyframeCurve",
    "CallableCurve",
    # Noise
    "NoiseField",
    "SeededOffset",
    "derive_seeded_offset",
    "perlin_noise",
    # Falloff
    "FalloffCache",
    "build_falloff_mask",
    "evaluate_falloff",
    # Height field and mesh
    "HeightField",
    "MeshBuffers",
    "MeshTessellator",
    "compute_normals",
    # Generation
    "GenerationPipeline",
    "generate_mesh",
    "validate_config",
    # Persistence and validation
    "save_mesh",
    "load_mesh",
    "export_obj",
    "ValidationResult",
    "validate_mesh",
    # Exceptions
    "IslandMeshError",
    "ConfigurationError",
    "MeshFormatError",
]
