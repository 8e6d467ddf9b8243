"""Custom exceptions for terrain mesh generation."""


class IslandMeshError(Exception):
    """Base exception for islandmesh errors."""

    pass


class ConfigurationError(IslandMeshError):
    """Raised when a terrain configuration cannot produce a valid mesh."""

    pass


class MeshFormatError(IslandMeshError):
    """Raised when a saved mesh file is missing required data."""

    pass
