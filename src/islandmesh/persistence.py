"""Mesh persistence: save, load and export generated meshes."""

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import structlog

from .config import TerrainConfig
from .exceptions import MeshFormatError
from .mesh import MeshBuffers

logger = structlog.get_logger()

FORMAT_VERSION = 1

_REQUIRED_ARRAYS = ("vertices", "uvs", "triangles", "normals", "metadata")


def save_mesh(path: Path, mesh: MeshBuffers, config: TerrainConfig) -> None:
    """Save a generated mesh to disk.

    Uses numpy's compressed .npz format for efficient storage.

    Args:
        path: Output path (should end with .npz).
        mesh: Mesh buffers to save.
        config: Generation configuration used.
    """
    metadata = {
        "version": FORMAT_VERSION,
        "seed": config.seed,
        "terrain_size": config.terrain_size,
        "simplification": config.simplification,
        "vertex_count": mesh.vertex_count,
        "vertices_per_line": mesh.vertices_per_line,
        "increment": mesh.increment,
        "origin": list(mesh.origin),
        "config": config.model_dump(mode="json"),
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        vertices=mesh.vertices,
        uvs=mesh.uvs,
        triangles=mesh.triangles,
        normals=mesh.normals,
        metadata=json.dumps(metadata).encode("utf-8"),
    )

    file_size = path.stat().st_size / 1024
    logger.info("mesh_saved", path=str(path), size_kb=round(file_size, 1))


def load_mesh(path: Path) -> tuple[MeshBuffers, dict]:
    """Load a mesh from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (MeshBuffers, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        MeshFormatError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Mesh file not found: {path}")

    with np.load(path) as data:
        missing = [name for name in _REQUIRED_ARRAYS if name not in data]
        if missing:
            raise MeshFormatError(f"Invalid mesh file: missing {', '.join(missing)}")

        metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        if metadata.get("version") != FORMAT_VERSION:
            raise MeshFormatError(
                f"Unsupported mesh file version: {metadata.get('version')}"
            )

        mesh = MeshBuffers(
            vertices=data["vertices"],
            uvs=data["uvs"],
            triangles=data["triangles"],
            normals=data["normals"],
            vertex_count=metadata["vertex_count"],
            vertices_per_line=metadata["vertices_per_line"],
            increment=metadata["increment"],
            origin=tuple(metadata["origin"]),
        )

    logger.info("mesh_loaded", path=str(path), vertices=mesh.vertex_count)
    return mesh, metadata


def export_obj(path: Path, mesh: MeshBuffers, centered: bool = False) -> None:
    """Write the populated part of a mesh as a Wavefront OBJ file.

    Coordinates are written as generated; OBJ faces are 1-based and share
    indices between positions, UVs and normals.

    Args:
        path: Output path.
        mesh: Mesh buffers to export.
        centered: Translate vertices by the mesh origin.
    """
    vertices = mesh.centered_vertices() if centered else mesh.populated_vertices()
    faces = mesh.triangle_triples() + 1

    with open(path, "w") as f:
        f.write(f"# islandmesh: {mesh.vertex_count} vertices, {mesh.triangle_count} triangles\n")
        np.savetxt(f, vertices, fmt="v %.6f %.6f %.6f")
        np.savetxt(f, mesh.populated_uvs(), fmt="vt %.6f %.6f")
        np.savetxt(f, mesh.populated_normals(), fmt="vn %.6f %.6f %.6f")
        np.savetxt(
            f,
            np.repeat(faces, 3, axis=1),
            fmt="f %d/%d/%d %d/%d/%d %d/%d/%d",
        )

    logger.info("mesh_exported", path=str(path), format="obj")
