"""Mesh tessellation: vertices, UVs, triangles and normals from a height field."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .config import TerrainConfig
from .heightfield import HeightField

# Largest vertex buffer a 16-bit index buffer can address
MAX_16BIT_VERTICES = 65535


@dataclass(eq=False)
class MeshBuffers:
    """Generated mesh data.

    The vertex, UV and normal buffers have ``(vertices_per_line + 1) ** 2``
    slots. Only the first ``vertex_count`` are filled, in row-major order
    (z outer, x inner); the rest stay zero. Triangle indices only reference
    filled slots.
    """

    vertices: NDArray[np.float32]
    uvs: NDArray[np.float32]
    triangles: NDArray[np.uint16] | NDArray[np.uint32]
    normals: NDArray[np.float32]
    vertex_count: int
    vertices_per_line: int
    increment: int
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    @property
    def index_format(self) -> str:
        return "uint32" if self.triangles.dtype == np.uint32 else "uint16"

    def populated_vertices(self) -> NDArray[np.float32]:
        """Vertices visited by the grid walk, without the unused slack slots."""
        return self.vertices[: self.vertex_count]

    def populated_uvs(self) -> NDArray[np.float32]:
        return self.uvs[: self.vertex_count]

    def populated_normals(self) -> NDArray[np.float32]:
        return self.normals[: self.vertex_count]

    def triangle_triples(self) -> NDArray[np.int64]:
        """Triangle indices reshaped to (triangle_count, 3)."""
        return self.triangles.astype(np.int64).reshape(-1, 3)

    def centered_vertices(self) -> NDArray[np.float32]:
        """Populated vertices translated so the terrain is centered on the origin."""
        return self.populated_vertices() + np.asarray(self.origin, dtype=np.float32)


def compute_normals(
    vertices: NDArray[np.float32],
    triangles: NDArray[np.integer],
) -> NDArray[np.float32]:
    """Compute smooth vertex normals.

    Face normals ``cross(v1 - v0, v2 - v0)`` are summed onto their corners
    (weighted by triangle area) and normalized. Vertices not referenced by
    any triangle get a zero normal.

    Args:
        vertices: Vertex positions, shape (N, 3).
        triangles: Flat triangle index array.

    Returns:
        Normals, shape (N, 3).
    """
    verts = vertices.astype(np.float64)
    tris = triangles.astype(np.int64).reshape(-1, 3)

    v0 = verts[tris[:, 0]]
    v1 = verts[tris[:, 1]]
    v2 = verts[tris[:, 2]]
    face_normals = np.cross(v1 - v0, v2 - v0)

    normals = np.zeros_like(verts)
    for corner in range(3):
        np.add.at(normals, tris[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    np.divide(normals, lengths, out=normals, where=lengths > 0)

    return normals.astype(np.float32)


def grid_triangles(vertices_per_line: int) -> NDArray[np.int64]:
    """Triangle indices for a square vertex grid.

    Each quad emits (top_left, bottom_left, top_right) and
    (top_right, bottom_left, bottom_right), which faces +y for a
    clockwise-front, left-handed convention.
    """
    cells = np.arange(vertices_per_line - 1)
    top_left = (cells[:, np.newaxis] * vertices_per_line + cells[np.newaxis, :]).ravel()
    top_right = top_left + 1
    bottom_left = top_left + vertices_per_line
    bottom_right = bottom_left + 1

    return np.stack(
        [top_left, bottom_left, top_right, top_right, bottom_left, bottom_right],
        axis=1,
    ).ravel()


class MeshTessellator:
    """Walks the decimated grid and emits mesh buffers."""

    def tessellate(self, config: TerrainConfig, height_field: HeightField) -> MeshBuffers:
        """Build mesh buffers for the configured grid.

        Args:
            config: Terrain configuration (already validated).
            height_field: Height source for every visited cell.

        Returns:
            MeshBuffers for the grid.
        """
        increment = config.increment
        vertices_per_line = config.vertices_per_line
        slots = (vertices_per_line + 1) ** 2

        steps = np.arange(0, config.terrain_size, increment)
        zz, xx = np.meshgrid(steps, steps, indexing="ij")
        heights = height_field.heights(xx, zz)

        filled = xx.size
        vertices = np.zeros((slots, 3), dtype=np.float32)
        vertices[:filled, 0] = xx.ravel()
        vertices[:filled, 1] = heights.ravel()
        vertices[:filled, 2] = zz.ravel()

        uv_scale = float(vertices_per_line - 1)
        uvs = np.zeros((slots, 2), dtype=np.float32)
        uvs[:filled, 0] = (xx // increment).ravel() / uv_scale
        uvs[:filled, 1] = (zz // increment).ravel() / uv_scale

        index_dtype = np.uint32 if config.use_32bit_index else np.uint16
        triangles = grid_triangles(vertices_per_line).astype(index_dtype)

        half = config.terrain_size / 2
        return MeshBuffers(
            vertices=vertices,
            uvs=uvs,
            triangles=triangles,
            normals=compute_normals(vertices, triangles),
            vertex_count=filled,
            vertices_per_line=vertices_per_line,
            increment=increment,
            origin=(-half, 0.0, -half),
        )
